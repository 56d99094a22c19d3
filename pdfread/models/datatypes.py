"""Core datatypes shared across pdfread modules.

Responsibilities:
- Represent immutable records exchanged between orchestrators and callers.
- Provide explicit wire conversions for JSON prompts and persisted lists.

Key types:
- `Sentence`, `TranslationResult`, `TargetLanguage`, `WordDefinition`,
  `WordLookupResult`, `VocabularyEntry`, and `RecentBook`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Sentence:
    """A sentence submitted for translation.

    Attributes:
        sid: Identifier unique within one request. The prefix before the first
            `:` names the document scope (`doc42:sent7` -> `doc42`).
        text: Source text to translate.
    """

    sid: str
    text: str

    def to_payload(self) -> dict[str, str]:
        """Return the prompt payload form of this sentence."""

        return {"sid": self.sid, "text": self.text}


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """Translated text paired with the requesting sentence id."""

    sid: str
    translation: str

    def to_payload(self) -> dict[str, str]:
        """Return the wire form of this result."""

        return {"sid": self.sid, "translation": self.translation}


@dataclass(frozen=True, slots=True)
class TargetLanguage:
    """Human label and identifier code of a translation target language."""

    label: str
    code: str


@dataclass(frozen=True, slots=True)
class WordDefinition:
    """One part-of-speech group of meanings for a looked-up word."""

    pos: str
    meanings: str

    def to_payload(self) -> dict[str, str]:
        """Return the wire form of this definition."""

        return {"pos": self.pos, "meanings": self.meanings}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> WordDefinition:
        """Build a definition from a persisted mapping."""

        return cls(pos=str(payload.get("pos") or ""), meanings=str(payload.get("meanings") or ""))


@dataclass(frozen=True, slots=True)
class WordLookupResult:
    """Dictionary-style lookup output for one word."""

    phonetic: str | None
    definitions: tuple[WordDefinition, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire form of this lookup result."""

        return {
            "phonetic": self.phonetic,
            "definitions": [definition.to_payload() for definition in self.definitions],
        }


@dataclass(frozen=True, slots=True)
class VocabularyEntry:
    """A word saved by the reader together with its looked-up definitions.

    Attributes:
        word: The saved word as the reader selected it.
        phonetic: Optional pronunciation string.
        definitions: Ordered definitions at the time the word was saved.
        added_at: ISO-8601 UTC timestamp of the first save.
    """

    word: str
    phonetic: str | None
    definitions: tuple[WordDefinition, ...]
    added_at: str

    def to_payload(self) -> dict[str, Any]:
        """Return the persisted form of this entry."""

        return {
            "word": self.word,
            "phonetic": self.phonetic,
            "definitions": [definition.to_payload() for definition in self.definitions],
            "added_at": self.added_at,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> VocabularyEntry:
        """Build an entry from its persisted mapping."""

        raw_definitions = payload.get("definitions") or []
        return cls(
            word=str(payload["word"]),
            phonetic=payload.get("phonetic") or None,
            definitions=tuple(
                WordDefinition.from_payload(item)
                for item in raw_definitions
                if isinstance(item, Mapping)
            ),
            added_at=str(payload.get("added_at") or ""),
        )


@dataclass(frozen=True, slots=True)
class RecentBook:
    """A recently opened document and the reader's position in it.

    Attributes:
        id: Stable document id (content-hash prefix computed by the caller).
        file_path: Absolute path of the document.
        file_name: Base file name.
        file_type: `pdf` or `epub`.
        title: Display title.
        author: Optional author.
        cover_image: Optional cover image reference (data URL or path).
        total_pages: Page count at the time the book was opened.
        last_page: 1-based page the reader last visited.
        progress: Reading progress percentage in `[0, 100]`.
        last_opened_at: ISO-8601 UTC timestamp of the latest open.
    """

    id: str
    file_path: str
    file_name: str
    file_type: str
    title: str
    author: str | None = None
    cover_image: str | None = None
    total_pages: int = 0
    last_page: int = 1
    progress: float = 0.0
    last_opened_at: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Return the persisted form of this book."""

        return {
            "id": self.id,
            "file_path": self.file_path,
            "file_name": self.file_name,
            "file_type": self.file_type,
            "title": self.title,
            "author": self.author,
            "cover_image": self.cover_image,
            "total_pages": self.total_pages,
            "last_page": self.last_page,
            "progress": self.progress,
            "last_opened_at": self.last_opened_at,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RecentBook:
        """Build a book from its persisted mapping."""

        return cls(
            id=str(payload["id"]),
            file_path=str(payload.get("file_path") or ""),
            file_name=str(payload.get("file_name") or ""),
            file_type=str(payload.get("file_type") or "pdf"),
            title=str(payload.get("title") or ""),
            author=payload.get("author") or None,
            cover_image=payload.get("cover_image") or None,
            total_pages=int(payload.get("total_pages") or 0),
            last_page=int(payload.get("last_page") or 1),
            progress=float(payload.get("progress") or 0.0),
            last_opened_at=str(payload.get("last_opened_at") or ""),
        )
