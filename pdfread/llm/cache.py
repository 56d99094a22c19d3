"""Persistent translation cache keyed by sentence fingerprints.

Responsibilities:
- Load the whole cache snapshot once per orchestrator call.
- Track hit/miss counters for the lifetime of that in-memory view.
- Rewrite the whole snapshot atomically after mutation.

The snapshot shape is `{"entries": {"<fingerprint>": "<translated text>"}}`.
Concurrent writers are not serialized: the last save replaces the whole file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..errors import PersistenceError
from ..io.storage import JsonDocumentStore

_ENTRIES_FIELD = "entries"


@dataclass(slots=True)
class TranslationCache:
    """In-memory view of the cache snapshot for one call."""

    entries: dict[str, str] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def get(self, cache_key: str) -> str | None:
        """Return the cached translation, counting the lookup as a hit or miss."""

        value = self.entries.get(cache_key)
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def set(self, cache_key: str, value: str) -> None:
        self.entries[cache_key] = value

    def hit_rate(self) -> float:
        """Fraction of lookups on this view that were served from the snapshot."""

        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def __len__(self) -> int:
        return len(self.entries)


class CacheStore:
    """Load and save the translation cache snapshot file."""

    def __init__(self, path: Path) -> None:
        """Initialize the store with the snapshot path."""

        self.path = path
        self._document = JsonDocumentStore(path)

    def load(self) -> TranslationCache:
        """Read the snapshot, returning an empty cache when none exists yet."""

        payload = self._document.load()
        if payload is None:
            return TranslationCache()

        raw_entries = payload.get(_ENTRIES_FIELD)
        if not isinstance(raw_entries, dict):
            raise PersistenceError(
                f"Cache file `{self.path}` is missing an `{_ENTRIES_FIELD}` object.",
                path=self.path,
                hint="Delete the cache file to rebuild it.",
            )
        entries = {
            str(key): value for key, value in raw_entries.items() if isinstance(value, str)
        }
        return TranslationCache(entries=entries)

    def save(self, cache: TranslationCache) -> Path:
        """Rewrite the whole snapshot with the current cache entries."""

        return self._document.save({_ENTRIES_FIELD: dict(cache.entries)})
