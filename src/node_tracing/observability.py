"""Langfuse handler construction for a single node execution."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from langfuse.callback import CallbackHandler

from .config import TracingSettings
from .context import ExecutionContext
from .diagnostics import DiagnosticReporter, guarded

HandlerFactory = Callable[..., Any]


class AbsenceReason(str, Enum):
    """Why no trace handle was produced."""

    MISSING_CREDENTIALS = "missing_credentials"
    CONSTRUCTION_FAILED = "construction_failed"


@dataclass(frozen=True, slots=True)
class HandleResult:
    """Either a live handler or the reason tracing is off for this call."""

    handle: Optional[Any] = None
    reason: Optional[AbsenceReason] = None
    error: Optional[BaseException] = None

    @classmethod
    def ready(cls, handle: Any) -> "HandleResult":
        return cls(handle=handle)

    @classmethod
    def absent(
        cls,
        reason: AbsenceReason,
        error: Optional[BaseException] = None,
    ) -> "HandleResult":
        return cls(reason=reason, error=error)

    @property
    def enabled(self) -> bool:
        return self.handle is not None


def build_trace_handle(
    context: ExecutionContext,
    settings: TracingSettings,
    diagnostics: DiagnosticReporter,
    *,
    handler_factory: Optional[HandlerFactory] = None,
) -> HandleResult:
    """Create a Langfuse callback handler bound to this execution.

    Missing credentials and construction failures both yield an absent
    result; nothing raised while building the handler reaches the caller.
    """

    diagnostics = guarded(diagnostics)
    factory = handler_factory or CallbackHandler
    try:
        diagnostics.record(
            "[Langfuse] build_trace_handle called - pk: {}, sk: {}".format(
                settings.has_public_key,
                settings.has_secret_key,
            )
        )
        if not settings.has_credentials:
            diagnostics.record("[Langfuse] Missing credentials - not initializing")
            return HandleResult.absent(AbsenceReason.MISSING_CREDENTIALS)

        execution_id = context.get_execution_id()
        workflow = context.get_workflow()
        node = context.get_node()
        diagnostics.record(
            f"[Langfuse] Initializing handler for execution: {execution_id}"
        )
        handler = factory(
            public_key=settings.public_key,
            secret_key=settings.secret_key,
            host=settings.host,
            flush_at=settings.flush_at,
            session_id=execution_id,
            user_id=workflow.id,
            metadata={
                "workflow": workflow.name,
                "node": node.name,
                "execution_id": execution_id,
            },
        )
        if handler is None:
            diagnostics.record("[Langfuse] Handler factory returned nothing")
            return HandleResult.absent(AbsenceReason.CONSTRUCTION_FAILED)
        diagnostics.record("[Langfuse] Handler created successfully")
        return HandleResult.ready(handler)
    except Exception as exc:
        diagnostics.record(f"[Langfuse] Initialization failed: {exc}")
        diagnostics.record(
            "[Langfuse] Error stack: "
            + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        )
        _log_debug(context, "Langfuse handler initialization failed", exc)
        return HandleResult.absent(AbsenceReason.CONSTRUCTION_FAILED, error=exc)


def _log_debug(context: Any, message: str, exc: BaseException) -> None:
    engine_logger = getattr(context, "logger", None)
    if engine_logger is None:
        return
    try:
        engine_logger.debug(message, {"error": exc})
    except Exception:
        pass
