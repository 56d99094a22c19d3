"""Tolerant decoding of model JSON output into typed results.

Responsibilities:
- Decode translation batches, accepting historical field-name spellings
  through one alias table and dropping incomplete records.
- Decode word lookups strictly; any shape violation is a `ParseError`.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from ..errors import ParseError
from ..models.datatypes import TranslationResult, WordDefinition, WordLookupResult

# Canonical field -> accepted spellings, in priority order.
TRANSLATION_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "sid": ("sid", "id"),
    "translation": (
        "translation",
        "translated",
        "translated_text",
        "translatedText",
        "target",
        "result",
        "text",
    ),
}


def _load_json(extracted: str) -> Any:
    try:
        return json.loads(extracted)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Model output is not valid JSON: {exc.msg}.", snippet=extracted) from exc


def _resolve_alias(record: Mapping[str, Any], canonical: str) -> str | None:
    """Return the value under the highest-priority alias key present in `record`.

    Only that key is consulted. A blank or non-string value there marks the
    field as missing; lower-priority spellings are not tried, so an echoed
    source `text` never stands in for an empty `translation`.
    """

    for alias in TRANSLATION_FIELD_ALIASES[canonical]:
        if alias not in record:
            continue
        value = record[alias]
        if isinstance(value, str) and value.strip():
            return value
        return None
    return None


def decode_translations(extracted: str) -> list[TranslationResult]:
    """Decode a JSON array of translation records.

    Records that are not objects, or that lack an id or translated text under
    every accepted spelling, are omitted rather than failing the batch.

    Raises:
        ParseError: If the text is not JSON or the outer value is not an array.
    """

    payload = _load_json(extracted)
    if not isinstance(payload, list):
        raise ParseError(
            f"Expected a JSON array of translations, got {type(payload).__name__}.",
            snippet=extracted,
        )

    results: list[TranslationResult] = []
    for record in payload:
        if not isinstance(record, dict):
            continue
        sid = _resolve_alias(record, "sid")
        translation = _resolve_alias(record, "translation")
        if sid is None or translation is None:
            continue
        results.append(TranslationResult(sid=sid, translation=translation))
    return results


def decode_word_lookup(extracted: str) -> WordLookupResult:
    """Decode a word lookup object with `phonetic` and ordered `definitions`.

    Raises:
        ParseError: On any deviation from the expected object shape.
    """

    payload = _load_json(extracted)
    if not isinstance(payload, dict):
        raise ParseError(
            f"Expected a JSON object for word lookup, got {type(payload).__name__}.",
            snippet=extracted,
        )

    phonetic = payload.get("phonetic")
    if phonetic is not None and not isinstance(phonetic, str):
        raise ParseError("Word lookup `phonetic` must be a string.", snippet=extracted)

    raw_definitions = payload.get("definitions")
    if not isinstance(raw_definitions, list):
        raise ParseError("Word lookup is missing a `definitions` list.", snippet=extracted)

    definitions: list[WordDefinition] = []
    for index, item in enumerate(raw_definitions):
        if not isinstance(item, dict):
            raise ParseError(f"Word lookup definition {index} is not an object.", snippet=extracted)
        pos = item.get("pos")
        meanings = item.get("meanings")
        if not isinstance(pos, str) or not isinstance(meanings, str):
            raise ParseError(
                f"Word lookup definition {index} needs string `pos` and `meanings`.",
                snippet=extracted,
            )
        definitions.append(WordDefinition(pos=pos.strip(), meanings=meanings.strip()))

    normalized_phonetic = phonetic.strip() if isinstance(phonetic, str) else ""
    return WordLookupResult(
        phonetic=normalized_phonetic or None,
        definitions=tuple(definitions),
    )
