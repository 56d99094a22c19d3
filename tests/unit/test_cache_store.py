"""Unit tests for the persistent translation cache store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pdfread.errors import PersistenceError
from pdfread.llm.cache import CacheStore, TranslationCache


def test_load_returns_empty_cache_when_snapshot_is_missing(tmp_path: Path) -> None:
    """Missing snapshot should load as an empty cache rather than an error."""

    cache = CacheStore(tmp_path / "missing" / "translation_cache.json").load()

    assert cache.entries == {}
    assert len(cache) == 0


def test_save_creates_parent_directory_and_writes_pretty_entries(tmp_path: Path) -> None:
    """Save should create missing directories and persist `{entries: {...}}`."""

    path = tmp_path / "nested" / "config" / "translation_cache.json"
    store = CacheStore(path)

    store.save(TranslationCache(entries={"k1": "こんにちは", "k2": "v2"}))

    raw_text = path.read_text(encoding="utf-8")
    assert json.loads(raw_text) == {"entries": {"k1": "こんにちは", "k2": "v2"}}
    assert "\n  " in raw_text
    assert "こんにちは" in raw_text


def test_save_then_load_rewrites_whole_snapshot(tmp_path: Path) -> None:
    """Every save should replace the full snapshot with the given map."""

    store = CacheStore(tmp_path / "translation_cache.json")
    store.save(TranslationCache(entries={"old": "value"}))
    store.save(TranslationCache(entries={"new": "value"}))

    assert store.load().entries == {"new": "value"}
    assert not list(tmp_path.glob("*.tmp"))


def test_load_rejects_snapshot_without_entries_object(tmp_path: Path) -> None:
    """A snapshot with the wrong shape should surface as a persistence error."""

    path = tmp_path / "translation_cache.json"
    path.write_text('{"entries": []}', encoding="utf-8")

    with pytest.raises(PersistenceError, match="missing an `entries` object"):
        CacheStore(path).load()


def test_load_rejects_corrupt_snapshot(tmp_path: Path) -> None:
    """Invalid JSON should not be silently treated as an empty cache."""

    path = tmp_path / "translation_cache.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError, match="not valid JSON"):
        CacheStore(path).load()


def test_save_reports_unwritable_directory(tmp_path: Path) -> None:
    """Save should raise a persistence error when the directory cannot be created."""

    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = CacheStore(blocker / "translation_cache.json")

    with pytest.raises(PersistenceError, match="Failed to write"):
        store.save(TranslationCache(entries={"k": "v"}))


def test_translation_cache_tracks_hits_and_misses() -> None:
    """Cache get/set should keep hit/miss counters deterministic."""

    cache = TranslationCache()
    assert cache.get("missing-key") is None
    cache.set("known-key", "value")
    assert cache.get("known-key") == "value"

    assert cache.hits == 1
    assert cache.misses == 1
    assert cache.hit_rate() == 0.5
