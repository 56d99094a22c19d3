"""Top-level package for pdfread.

This package provides the backend of a translating document reader: a
fingerprint-cached sentence translator, dictionary lookups, and the small
file-backed stores (vocabulary, recent books, API key) the reader relies on.
The main entry points are `SentenceTranslator` and `WordLookup`.
"""

from .llm.dictionary import WordLookup
from .llm.translator import SentenceTranslator

__all__ = ["SentenceTranslator", "WordLookup", "__version__"]

__version__ = "0.1.0"
