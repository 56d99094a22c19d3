"""LLM-facing components for translation, word lookup, and reader chat.

This package holds the fingerprint cache, response extraction and decoding,
prompt library, chat-completions client, and the orchestrators built on them.
"""

from .assistant import ContextAssistant
from .cache import CacheStore, TranslationCache
from .chat_client import ChatCompletionClient
from .decoding import decode_translations, decode_word_lookup
from .dictionary import WordLookup
from .extraction import extract_json
from .fingerprint import document_scope, fingerprint, sentence_fingerprint
from .prompts import PromptLibrary
from .translator import ChatClient, SentenceTranslator

__all__ = [
    "CacheStore",
    "ChatClient",
    "ChatCompletionClient",
    "ContextAssistant",
    "PromptLibrary",
    "SentenceTranslator",
    "TranslationCache",
    "WordLookup",
    "decode_translations",
    "decode_word_lookup",
    "document_scope",
    "extract_json",
    "fingerprint",
    "sentence_fingerprint",
]
