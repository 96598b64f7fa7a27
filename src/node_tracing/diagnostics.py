"""Best-effort diagnostic reporting for tracing decisions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from .config import TracingSettings

logger = logging.getLogger(__name__)


class DiagnosticReporter(Protocol):
    """Side channel for tracing decisions. Implementations must not raise."""

    def record(self, message: str) -> None: ...


class LoggingDiagnostics:
    """Forwards diagnostic records to the module logger only."""

    def record(self, message: str) -> None:
        logger.debug(message)


class FileDiagnosticLog:
    """Appends one timestamped line per record to a shared log file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, message: str) -> None:
        logger.debug(message)
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        # One physical line per record.
        flat = message.replace("\n", "\\n")
        line = f"{timestamp} - {flat}\n"
        try:
            # Single write per line so concurrent appenders never interleave.
            with self._path.open(
                "a", encoding="utf-8", errors="backslashreplace"
            ) as handle:
                handle.write(line)
        except OSError:
            pass


def diagnostics_from_settings(settings: TracingSettings) -> DiagnosticReporter:
    if settings.debug_log_path is None:
        return LoggingDiagnostics()
    return FileDiagnosticLog(settings.debug_log_path)


class GuardedDiagnostics:
    """Wraps an injected reporter so a failing record is dropped."""

    def __init__(self, reporter: DiagnosticReporter) -> None:
        self._reporter = reporter

    def record(self, message: str) -> None:
        try:
            self._reporter.record(message)
        except Exception:
            logger.debug("Diagnostic reporter failed", exc_info=True)


def guarded(reporter: DiagnosticReporter) -> DiagnosticReporter:
    if isinstance(reporter, (GuardedDiagnostics, LoggingDiagnostics, FileDiagnosticLog)):
        return reporter
    return GuardedDiagnostics(reporter)
