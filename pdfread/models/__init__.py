"""Shared typed data models for pdfread.

This package contains dataclasses used across orchestrators, stores, and the
CLI to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    RecentBook,
    Sentence,
    TargetLanguage,
    TranslationResult,
    VocabularyEntry,
    WordDefinition,
    WordLookupResult,
)

__all__ = [
    "RecentBook",
    "Sentence",
    "TargetLanguage",
    "TranslationResult",
    "VocabularyEntry",
    "WordDefinition",
    "WordLookupResult",
]
