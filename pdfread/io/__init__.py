"""Input/output components for pdfread.

This package contains JSON document storage and raw document file access
used by the cache, library stores, and the CLI.
"""

from .file_reader import read_document_bytes
from .storage import JsonDocumentStore

__all__ = ["JsonDocumentStore", "read_document_bytes"]
