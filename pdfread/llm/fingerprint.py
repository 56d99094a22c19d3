"""Content-addressed cache keys for sentence translations."""

from __future__ import annotations

from hashlib import sha256

from ..models.datatypes import Sentence

FINGERPRINT_SEPARATOR = "|"
SCOPE_DELIMITER = ":"


def document_scope(sid: str) -> str:
    """Return the document scope encoded as the sentence id prefix."""

    return sid.split(SCOPE_DELIMITER, 1)[0]


def fingerprint(scope: str, sid: str, text: str, model: str, language_code: str) -> str:
    """Build a deterministic cache key for one sentence translation.

    The source text is hashed verbatim, so any change to it (whitespace
    included) yields a different key.
    """

    text_hash = sha256(text.encode("utf-8")).hexdigest()
    return FINGERPRINT_SEPARATOR.join((scope, sid, text_hash, model, language_code))


def sentence_fingerprint(sentence: Sentence, model: str, language_code: str) -> str:
    """Build the cache key for a sentence using its own document scope."""

    return fingerprint(
        document_scope(sentence.sid),
        sentence.sid,
        sentence.text,
        model,
        language_code,
    )
