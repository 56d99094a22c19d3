"""Recently opened documents and reading progress."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from ..errors import PersistenceError
from ..io.storage import JsonDocumentStore
from ..models.datatypes import RecentBook

_BOOKS_FIELD = "books"
DEFAULT_MAX_BOOKS = 20


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecentBooksStore:
    """File-backed recent-books list ordered by last open time."""

    def __init__(
        self,
        path: Path,
        max_books: int = DEFAULT_MAX_BOOKS,
        clock: Callable[[], str] = _utc_now_iso,
    ) -> None:
        if max_books <= 0:
            raise ValueError("`max_books` must be a positive integer.")
        self.path = path
        self.max_books = max_books
        self.clock = clock
        self._document = JsonDocumentStore(path)

    def list_books(self) -> list[RecentBook]:
        """Return books with the most recently opened first."""

        payload = self._document.load()
        if payload is None:
            return []
        raw_books = payload.get(_BOOKS_FIELD)
        if not isinstance(raw_books, list):
            raise PersistenceError(
                f"Recent books file `{self.path}` is missing a `{_BOOKS_FIELD}` list.",
                path=self.path,
            )
        books = [
            RecentBook.from_payload(item)
            for item in raw_books
            if isinstance(item, dict) and item.get("id")
        ]
        return sorted(books, key=lambda book: book.last_opened_at, reverse=True)

    def add_book(
        self,
        *,
        id: str,
        file_path: str,
        file_name: str,
        file_type: str,
        title: str,
        author: str | None = None,
        cover_image: str | None = None,
        total_pages: int = 0,
    ) -> RecentBook:
        """Record that a book was opened, keeping any saved reading position."""

        books = self.list_books()
        existing = next((book for book in books if book.id == id), None)
        book = RecentBook(
            id=id,
            file_path=file_path,
            file_name=file_name,
            file_type=file_type,
            title=title,
            author=author,
            cover_image=cover_image if cover_image is not None else (
                existing.cover_image if existing is not None else None
            ),
            total_pages=total_pages,
            last_page=existing.last_page if existing is not None else 1,
            progress=existing.progress if existing is not None else 0.0,
            last_opened_at=self.clock(),
        )
        remaining = [item for item in books if item.id != id]
        self._save([book, *remaining][: self.max_books])
        return book

    def update_progress(self, id: str, last_page: int, progress: float) -> RecentBook:
        """Store the last visited page and progress percentage for a book."""

        books = self.list_books()
        for index, book in enumerate(books):
            if book.id == id:
                updated = replace(
                    book,
                    last_page=max(1, last_page),
                    progress=min(100.0, max(0.0, float(progress))),
                )
                books[index] = updated
                self._save(books)
                return updated
        raise KeyError(id)

    def remove_book(self, id: str) -> bool:
        """Forget a book and report whether it was listed."""

        books = self.list_books()
        kept = [book for book in books if book.id != id]
        if len(kept) == len(books):
            return False
        self._save(kept)
        return True

    def _save(self, books: list[RecentBook]) -> None:
        self._document.save({_BOOKS_FIELD: [book.to_payload() for book in books]})
