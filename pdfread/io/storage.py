"""JSON document storage for reader state files.

Responsibilities:
- Read and write whole JSON documents (cache, vocabulary, recent books).
- Replace documents atomically so readers never observe a partial file.
- Map filesystem failures to `PersistenceError`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
from typing import Any

from ..errors import PersistenceError


class JsonDocumentStore:
    """Filesystem-backed store for one JSON object document."""

    def __init__(self, path: Path) -> None:
        """Initialize the store with the document path."""

        self.path = path

    def load(self) -> dict[str, Any] | None:
        """Load the document, returning `None` when it does not exist yet."""

        if not self.path.exists():
            return None
        try:
            raw_text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                f"Failed to read `{self.path}`: {exc}",
                path=self.path,
            ) from exc
        try:
            payload = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"`{self.path}` is not valid JSON: {exc}",
                path=self.path,
                hint="Delete or repair the file and retry.",
            ) from exc
        if not isinstance(payload, dict):
            raise PersistenceError(
                f"`{self.path}` must contain a JSON object.",
                path=self.path,
            )
        return payload

    def save(self, payload: dict[str, Any]) -> Path:
        """Write the full document, creating parent directories as needed."""

        data = json.dumps(payload, ensure_ascii=False, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            file_descriptor, temp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(file_descriptor, "w", encoding="utf-8") as handle:
                    handle.write(data)
                os.replace(temp_name, self.path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(
                f"Failed to write `{self.path}`: {exc}",
                path=self.path,
                hint="Check that the config directory is writable.",
            ) from exc
        return self.path
