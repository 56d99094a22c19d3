"""Reader library state: saved vocabulary and recently opened books."""

from .recent_books import RecentBooksStore
from .vocabulary import VocabularyStore, render_vocabulary_markdown

__all__ = ["RecentBooksStore", "VocabularyStore", "render_vocabulary_markdown"]
