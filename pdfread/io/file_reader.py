"""Raw document file access for the reader frontend."""

from __future__ import annotations

from pathlib import Path

from ..errors import PersistenceError


def read_document_bytes(path: Path) -> bytes:
    """Return the raw bytes of a PDF or EPUB document."""

    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise PersistenceError(f"Document not found: `{path}`.", path=path) from exc
    except OSError as exc:
        raise PersistenceError(f"Failed to read document `{path}`: {exc}", path=path) from exc
