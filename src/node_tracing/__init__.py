"""Langfuse tracing configuration for workflow node executions."""

from __future__ import annotations

from typing import Optional

from .callbacks import CallbackEntry, InheritedCallback, TraceHandleCallback
from .config import DEFAULT_LANGFUSE_HOST, TracingSettings
from .context import (
    ExecutionContext,
    NodeIdentity,
    StaticExecutionContext,
    WorkflowIdentity,
)
from .diagnostics import DiagnosticReporter, FileDiagnosticLog, LoggingDiagnostics
from .observability import AbsenceReason, HandleResult, build_trace_handle
from .tracing import TracingConfig, TracingOptions, get_tracing_config

__all__ = [
    "AbsenceReason",
    "CallbackEntry",
    "DEFAULT_LANGFUSE_HOST",
    "DiagnosticReporter",
    "ExecutionContext",
    "FileDiagnosticLog",
    "HandleResult",
    "InheritedCallback",
    "LoggingDiagnostics",
    "NodeIdentity",
    "StaticExecutionContext",
    "TraceHandleCallback",
    "TracingConfig",
    "TracingOptions",
    "TracingSettings",
    "WorkflowIdentity",
    "build_trace_handle",
    "get_tracing_config",
    "run_cli",
]


def run_cli(argv: Optional[list[str]] = None) -> None:
    """Proxy to :mod:`node_tracing.cli.run_cli` for convenience."""

    from .cli import run_cli as _run_cli_impl

    _run_cli_impl(argv)
