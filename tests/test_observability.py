from node_tracing.config import TracingSettings
from node_tracing.observability import AbsenceReason, build_trace_handle


def test_handler_bound_to_execution_identity(context, settings, diagnostics, handler_factory):
    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=handler_factory,
    )

    assert result.enabled
    assert result.reason is None
    call = handler_factory.calls[0]
    assert call["public_key"] == "pk-lf-test"
    assert call["secret_key"] == "sk-lf-test"
    assert call["host"] == "https://cloud.langfuse.com"
    assert call["flush_at"] == 1
    assert call["session_id"] == "exec-42"
    assert call["user_id"] == "wf-7"
    assert call["metadata"] == {
        "workflow": "Invoice Flow",
        "node": "Summarize",
        "execution_id": "exec-42",
    }


def test_host_override_is_used(context, diagnostics, handler_factory):
    settings = TracingSettings(
        public_key="pk",
        secret_key="sk",
        host="https://langfuse.internal",
    )

    build_trace_handle(context, settings, diagnostics, handler_factory=handler_factory)

    assert handler_factory.calls[0]["host"] == "https://langfuse.internal"


def test_missing_secret_key_is_absent(context, diagnostics, handler_factory):
    settings = TracingSettings(public_key="pk", secret_key="  ")

    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=handler_factory,
    )

    assert not result.enabled
    assert result.reason is AbsenceReason.MISSING_CREDENTIALS
    assert result.error is None
    assert handler_factory.calls == []
    assert diagnostics.messages == [
        "[Langfuse] build_trace_handle called - pk: True, sk: False",
        "[Langfuse] Missing credentials - not initializing",
    ]


def test_construction_failure_is_reported(
    context, settings, diagnostics, failing_factory, engine_logger
):
    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=failing_factory,
    )

    assert not result.enabled
    assert result.reason is AbsenceReason.CONSTRUCTION_FAILED
    assert isinstance(result.error, RuntimeError)
    assert "[Langfuse] Initialization failed: langfuse unavailable" in diagnostics.messages
    assert any(m.startswith("[Langfuse] Error stack: ") for m in diagnostics.messages)
    message, args = engine_logger.debugs[0]
    assert message == "Langfuse handler initialization failed"
    assert args[0]["error"] is result.error


def test_failing_reporter_does_not_change_result(context, settings, handler_factory):
    class BrokenReporter:
        def record(self, message):
            raise OSError("disk full")

    result = build_trace_handle(
        context,
        settings,
        BrokenReporter(),
        handler_factory=handler_factory,
    )

    assert result.enabled
    assert len(handler_factory.calls) == 1


def test_broken_context_without_logger_is_absent(settings, diagnostics, handler_factory):
    class Context:
        def get_execution_id(self):
            return "exec-9"

        def get_workflow(self):
            raise KeyError("workflow")

        def get_node(self):
            raise KeyError("node")

    result = build_trace_handle(
        Context(),
        settings,
        diagnostics,
        handler_factory=handler_factory,
    )

    assert result.reason is AbsenceReason.CONSTRUCTION_FAILED
    assert handler_factory.calls == []


def test_factory_returning_nothing_is_absent(context, settings, diagnostics):
    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=lambda **kwargs: None,
    )

    assert not result.enabled
    assert result.reason is AbsenceReason.CONSTRUCTION_FAILED
    assert diagnostics.messages[-1] == "[Langfuse] Handler factory returned nothing"


def test_failing_engine_logger_on_construction_failure(
    context, settings, diagnostics, failing_factory
):
    class BrokenLogger:
        def debug(self, message, *args):
            raise ValueError("closed")

    context.logger = BrokenLogger()

    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=failing_factory,
    )

    assert result.reason is AbsenceReason.CONSTRUCTION_FAILED
