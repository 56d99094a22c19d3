"""Structured event logging utilities.

Responsibilities:
- Emit concise, deterministic one-line events through `loguru`.
- Keep secrets and payload text out of log lines; only ids, counts, and kinds.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def configure_logging(sink: TextIO | None = None, level: str = "INFO") -> None:
    """Install a single plain-text loguru sink for CLI runs."""

    _loguru_logger.remove()
    _loguru_logger.add(sink or sys.stderr, format="{message}", level=level, colorize=False)


class EventLogger:
    """Emit deterministic event lines for one orchestration scope."""

    def __init__(self, scope: str) -> None:
        """Initialize the logger with a scope label such as `translate`."""

        self.scope = scope

    def _emit(self, level: str, event: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[pdfread] level={level} scope={self.scope} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def debug(self, event: str, **context: object) -> None:
        """Emit a debug-level event."""

        self._emit("DEBUG", event, **context)

    def info(self, event: str, **context: object) -> None:
        """Emit an info-level event."""

        self._emit("INFO", event, **context)

    def warning(self, event: str, **context: object) -> None:
        """Emit a warning-level event."""

        self._emit("WARNING", event, **context)

    def failure(self, event: str, error: BaseException, **context: object) -> None:
        """Emit an error event naming only the error type."""

        self._emit("ERROR", event, error_type=type(error).__name__, **context)
