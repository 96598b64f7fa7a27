"""Per-invocation tracing configuration for workflow nodes.

``get_tracing_config`` is called once per node execution. It composes the
callbacks inherited from the parent run with a Langfuse handler (when
credentials are configured) and wraps them with a run name and metadata
envelope the engine passes to downstream LangChain calls. It never raises:
a broken tracing setup only means the invocation goes untraced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from langchain_core.runnables import RunnableConfig

from .callbacks import (
    CallbackEntry,
    TraceHandleCallback,
    inherited_chain,
    to_langchain_callbacks,
)
from .config import TracingSettings
from .context import ExecutionContext, NodeIdentity, WorkflowIdentity
from .diagnostics import (
    DiagnosticReporter,
    LoggingDiagnostics,
    diagnostics_from_settings,
    guarded,
)
from .observability import HandlerFactory, build_trace_handle

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TracingOptions:
    """Caller overrides; entries here win over the default metadata keys."""

    additional_metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TracingConfig:
    run_name: str
    metadata: Mapping[str, Any]
    callbacks: Optional[Tuple[CallbackEntry, ...]] = None

    @property
    def tracing_enabled(self) -> bool:
        return any(
            isinstance(entry, TraceHandleCallback)
            for entry in self.callbacks or ()
        )

    def to_runnable_config(self) -> RunnableConfig:
        """Render as the ``config`` argument of ``Runnable.invoke``."""

        config: RunnableConfig = {
            "run_name": self.run_name,
            "metadata": dict(self.metadata),
        }
        if self.callbacks:
            config["callbacks"] = to_langchain_callbacks(self.callbacks)
        return config


def get_tracing_config(
    context: ExecutionContext,
    options: Optional[TracingOptions] = None,
    *,
    settings: Optional[TracingSettings] = None,
    diagnostics: Optional[DiagnosticReporter] = None,
    handler_factory: Optional[HandlerFactory] = None,
) -> TracingConfig:
    """Build the run name, metadata and callback chain for one node call."""

    options = options or TracingOptions()
    settings = settings or _load_settings(diagnostics)
    if diagnostics is None:
        diagnostics = diagnostics_from_settings(settings)
    diagnostics = guarded(diagnostics)

    workflow = _read(context, "get_workflow", WorkflowIdentity(id="", name=""))
    node = _read(context, "get_node", NodeIdentity(name=""))
    execution_id = _read(context, "get_execution_id", "")
    workflow_name = _attr(workflow, "name")
    node_name = _attr(node, "name")
    diagnostics.record(
        f"[Langfuse] get_tracing_config called for node: {node_name} "
        f"(type: {_attr(node, 'type')})"
    )

    callbacks = list(inherited_chain(_parent_callbacks(context)))

    result = build_trace_handle(
        context,
        settings,
        diagnostics,
        handler_factory=handler_factory,
    )
    if result.enabled:
        callbacks.append(TraceHandleCallback(result.handle))
        diagnostics.record("[Langfuse] Handler added to callbacks array")
        _log_info(context, "Langfuse tracing enabled for this execution")
    else:
        reason = result.reason.value if result.reason else "unknown"
        diagnostics.record(
            f"[Langfuse] No handler ({reason}), not added to callbacks"
        )

    diagnostics.record(
        f"[Langfuse] Returning config with {len(callbacks)} callback(s)"
    )

    metadata: Dict[str, Any] = {
        "execution_id": execution_id,
        "workflow": _workflow_value(workflow),
        "node": node_name,
    }
    metadata.update(options.additional_metadata or {})

    return TracingConfig(
        run_name=f"[{workflow_name}] {node_name}",
        metadata=MappingProxyType(metadata),
        callbacks=tuple(callbacks) if callbacks else None,
    )


def _load_settings(diagnostics: Optional[DiagnosticReporter]) -> TracingSettings:
    try:
        return TracingSettings.load()
    except Exception as exc:
        reporter = guarded(diagnostics) if diagnostics else LoggingDiagnostics()
        reporter.record(f"[Langfuse] Settings could not be loaded: {exc}")
        logger.warning("Tracing settings could not be loaded: %s", exc)
        return TracingSettings(public_key=None, secret_key=None)


def _read(context: Any, accessor: str, default: Any) -> Any:
    getter = getattr(context, accessor, None)
    if getter is None:
        return default
    try:
        value = getter()
    except Exception as exc:
        logger.warning("Execution context %s() failed: %s", accessor, exc)
        return default
    return default if value is None else value


def _attr(value: Any, name: str) -> str:
    return getattr(value, name, None) or ""


def _parent_callbacks(context: Any) -> Any:
    return _read(context, "get_parent_callback_manager", None)


def _workflow_value(workflow: Any) -> Any:
    to_dict = getattr(workflow, "to_dict", None)
    return to_dict() if callable(to_dict) else workflow


def _log_info(context: Any, message: str) -> None:
    engine_logger = getattr(context, "logger", None)
    if engine_logger is None:
        return
    try:
        engine_logger.info(message)
    except Exception:
        pass
