"""Configuration helpers for node tracing."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from typing import Optional

DEFAULT_LANGFUSE_HOST = "https://cloud.langfuse.com"
DEFAULT_DEBUG_LOG_PATH = "/tmp/langfuse-debug.log"
DEFAULT_FLUSH_AT = 1

_dotenv_loaded = False


@dataclass(slots=True)
class TracingSettings:
    """Langfuse credentials and diagnostic options for one process."""

    public_key: Optional[str]
    secret_key: Optional[str]
    host: str = DEFAULT_LANGFUSE_HOST
    flush_at: int = DEFAULT_FLUSH_AT
    debug_log_path: Optional[Path] = None

    @property
    def has_public_key(self) -> bool:
        return bool(self.public_key and self.public_key.strip())

    @property
    def has_secret_key(self) -> bool:
        return bool(self.secret_key and self.secret_key.strip())

    @property
    def has_credentials(self) -> bool:
        """Both keys must be present for tracing to be attempted."""
        return self.has_public_key and self.has_secret_key

    @classmethod
    def load(cls) -> "TracingSettings":
        """Load settings from the environment or .env file."""
        _ensure_dotenv()
        public_key = os.getenv("LANGFUSE_PUBLIC_KEY")
        secret_key = os.getenv("LANGFUSE_SECRET_KEY")
        host = (os.getenv("LANGFUSE_HOST") or "").strip()
        if not host:
            host = DEFAULT_LANGFUSE_HOST
        flush_at_raw = os.getenv("LANGFUSE_FLUSH_AT", str(DEFAULT_FLUSH_AT))
        try:
            flush_at = int(flush_at_raw)
        except ValueError as exc:
            raise RuntimeError("LANGFUSE_FLUSH_AT must be an integer") from exc
        if flush_at < 1:
            raise RuntimeError("LANGFUSE_FLUSH_AT must be at least 1")
        debug_log_raw = os.getenv(
            "NODE_TRACING_DEBUG_LOG",
            DEFAULT_DEBUG_LOG_PATH,
        ).strip()
        debug_log_path = Path(debug_log_raw) if debug_log_raw else None
        return cls(
            public_key=public_key,
            secret_key=secret_key,
            host=host,
            flush_at=flush_at,
            debug_log_path=debug_log_path,
        )


def _ensure_dotenv() -> None:
    """Load dotenv variables once per process."""

    global _dotenv_loaded
    if _dotenv_loaded:
        return

    try:
        dotenv_module = import_module("dotenv")
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dep
        raise RuntimeError(
            "python-dotenv is required. Install with `pip install "
            "python-dotenv`."
        ) from exc

    load_dotenv = getattr(dotenv_module, "load_dotenv")
    load_dotenv()
    _dotenv_loaded = True
