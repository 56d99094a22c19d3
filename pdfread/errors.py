"""Domain exceptions for translation, lookup, and persistence diagnostics.

Key types:
- `ReaderError`: base error with a user-facing detail and optional hint.
- `ConfigurationError`, `TransportError`, `ParseError`, `PersistenceError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.datatypes import TranslationResult


_MAX_SNIPPET_CHARS = 200


def truncate_snippet(text: str, limit: int = _MAX_SNIPPET_CHARS) -> str:
    """Return `text` capped to `limit` characters with an ellipsis marker."""

    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


class ReaderError(RuntimeError):
    """Base class for errors surfaced to reader callers."""

    def __init__(self, detail: str, *, hint: str | None = None) -> None:
        """Initialize an error with a descriptive detail and optional hint."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class ConfigurationError(ReaderError):
    """Raised when a credential or configuration precondition is not met."""


class TransportError(ReaderError):
    """Raised when the remote chat endpoint cannot be reached or rejects a call."""

    def __init__(
        self,
        detail: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize transport error metadata for diagnostics."""

        super().__init__(detail, hint=hint)
        self.failure_kind = failure_kind
        self.status_code = status_code


class ParseError(ReaderError):
    """Raised when model output cannot be decoded into the expected shape."""

    def __init__(self, detail: str, *, snippet: str = "") -> None:
        """Initialize a parse error carrying a truncated snippet of the input."""

        self.reason = detail
        self.snippet = truncate_snippet(snippet)
        if self.snippet:
            detail = f"{detail} Snippet: {self.snippet!r}"
        super().__init__(detail)


class PersistenceError(ReaderError):
    """Raised when durable state cannot be read or written."""

    def __init__(
        self,
        detail: str,
        *,
        path: Path | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a persistence error with the offending path."""

        super().__init__(detail, hint=hint)
        self.path = path
        self.results: list[TranslationResult] = []
