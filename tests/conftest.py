from typing import Any, Dict, List

import pytest

from node_tracing.config import TracingSettings
from node_tracing.context import NodeIdentity, StaticExecutionContext, WorkflowIdentity


class FakeHandler:
    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs


class HandlerFactory:
    """Records every construction instead of talking to Langfuse."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> FakeHandler:
        self.calls.append(kwargs)
        return FakeHandler(**kwargs)


class RecordingDiagnostics:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def record(self, message: str) -> None:
        self.messages.append(message)


class RecordingLogger:
    def __init__(self) -> None:
        self.infos: List[str] = []
        self.debugs: List[tuple] = []

    def info(self, message: str, *args: Any) -> None:
        self.infos.append(message)

    def debug(self, message: str, *args: Any) -> None:
        self.debugs.append((message, args))


def exploding_factory(**kwargs: Any) -> Any:
    raise RuntimeError("langfuse unavailable")


@pytest.fixture
def handler_factory() -> HandlerFactory:
    return HandlerFactory()


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def engine_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def settings() -> TracingSettings:
    return TracingSettings(public_key="pk-lf-test", secret_key="sk-lf-test")


@pytest.fixture
def no_credentials() -> TracingSettings:
    return TracingSettings(public_key=None, secret_key=None)


@pytest.fixture
def context(engine_logger: RecordingLogger) -> StaticExecutionContext:
    return StaticExecutionContext(
        execution_id="exec-42",
        workflow=WorkflowIdentity(id="wf-7", name="Invoice Flow"),
        node=NodeIdentity(name="Summarize", type="@n8n/n8n-nodes-langchain.chainLlm"),
        logger=engine_logger,
    )


@pytest.fixture
def failing_factory():
    return exploding_factory
