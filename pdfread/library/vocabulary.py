"""Saved-word vocabulary list with markdown export.

Words are matched case-insensitively; the first saved spelling and its
`added_at` timestamp are kept when a word is saved again.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from ..errors import PersistenceError
from ..io.storage import JsonDocumentStore
from ..models.datatypes import VocabularyEntry, WordDefinition

_WORDS_FIELD = "words"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _word_key(word: str) -> str:
    return word.strip().casefold()


class VocabularyStore:
    """File-backed list of saved words."""

    def __init__(self, path: Path, clock: Callable[[], str] = _utc_now_iso) -> None:
        self.path = path
        self.clock = clock
        self._document = JsonDocumentStore(path)

    def list_words(self) -> list[VocabularyEntry]:
        """Return saved words in the order they were first added."""

        payload = self._document.load()
        if payload is None:
            return []
        raw_words = payload.get(_WORDS_FIELD)
        if not isinstance(raw_words, list):
            raise PersistenceError(
                f"Vocabulary file `{self.path}` is missing a `{_WORDS_FIELD}` list.",
                path=self.path,
            )
        return [
            VocabularyEntry.from_payload(item)
            for item in raw_words
            if isinstance(item, dict) and item.get("word")
        ]

    def contains(self, word: str) -> bool:
        """Return whether `word` is saved, ignoring case."""

        key = _word_key(word)
        return any(_word_key(entry.word) == key for entry in self.list_words())

    def add_word(
        self,
        word: str,
        phonetic: str | None,
        definitions: Sequence[WordDefinition],
    ) -> VocabularyEntry:
        """Save or refresh a word and return the stored entry."""

        normalized_word = word.strip()
        if not normalized_word:
            raise ValueError("Word must be a non-empty string.")

        entries = self.list_words()
        key = _word_key(normalized_word)
        for index, existing in enumerate(entries):
            if _word_key(existing.word) == key:
                updated = VocabularyEntry(
                    word=existing.word,
                    phonetic=phonetic or None,
                    definitions=tuple(definitions),
                    added_at=existing.added_at,
                )
                entries[index] = updated
                self._save(entries)
                return updated

        entry = VocabularyEntry(
            word=normalized_word,
            phonetic=phonetic or None,
            definitions=tuple(definitions),
            added_at=self.clock(),
        )
        entries.append(entry)
        self._save(entries)
        return entry

    def remove_word(self, word: str) -> bool:
        """Remove a saved word and report whether it was present."""

        entries = self.list_words()
        key = _word_key(word)
        kept = [entry for entry in entries if _word_key(entry.word) != key]
        if len(kept) == len(entries):
            return False
        self._save(kept)
        return True

    def export_markdown(self) -> str:
        """Render saved words as a markdown document."""

        return render_vocabulary_markdown(self.list_words())

    def _save(self, entries: Sequence[VocabularyEntry]) -> None:
        self._document.save({_WORDS_FIELD: [entry.to_payload() for entry in entries]})


def render_vocabulary_markdown(entries: Sequence[VocabularyEntry]) -> str:
    """Render vocabulary entries as markdown with one section per word."""

    lines = ["# Vocabulary", ""]
    if not entries:
        lines.append("No words saved yet.")
        return "\n".join(lines) + "\n"

    for entry in entries:
        lines.append(f"## {entry.word}")
        lines.append("")
        if entry.phonetic:
            lines.append(f"/{entry.phonetic.strip('/')}/")
            lines.append("")
        for definition in entry.definitions:
            if definition.pos:
                lines.append(f"- *{definition.pos}* {definition.meanings}")
            else:
                lines.append(f"- {definition.meanings}")
        if entry.definitions:
            lines.append("")
    return "\n".join(lines)
