"""Best-effort recovery of a JSON fragment from free-form model output.

Each strategy is a pure function returning the recovered text or `None`.
`extract_json` tries them in order and falls back to the trimmed input, so
extraction never fails; malformed output surfaces at the decode step.
"""

from __future__ import annotations

import re
from typing import Callable, Literal

ExpectedShape = Literal["array", "object"]

_DELIMITERS: dict[str, tuple[str, str]] = {
    "array": ("[", "]"),
    "object": ("{", "}"),
}
_FENCE = "```"
_JSON_FENCE_PATTERN = re.compile(r"```[ \t]*json\b", re.IGNORECASE)

Strategy = Callable[[str, str, str], str | None]


def _delimiters(expect: ExpectedShape) -> tuple[str, str]:
    try:
        return _DELIMITERS[expect]
    except KeyError as exc:
        raise ValueError(f"Unsupported JSON shape `{expect}`.") from exc


def extract_verbatim(text: str, opening: str, _closing: str) -> str | None:
    """Return trimmed text when it already starts with the opening delimiter."""

    trimmed = text.strip()
    if trimmed.startswith(opening):
        return trimmed
    return None


def extract_fenced_block(text: str, _opening: str, _closing: str) -> str | None:
    """Return the interior of a ```json fence, else of the first generic fence."""

    tagged = _JSON_FENCE_PATTERN.search(text)
    if tagged is not None:
        body_start = tagged.end()
        body_end = text.find(_FENCE, body_start)
        if body_end != -1:
            return text[body_start:body_end].strip()

    fence_start = text.find(_FENCE)
    if fence_start == -1:
        return None
    body_start = fence_start + len(_FENCE)
    body_end = text.find(_FENCE, body_start)
    if body_end == -1:
        return None
    body = text[body_start:body_end]
    first_line, newline, remainder = body.partition("\n")
    if newline and _is_language_tag(first_line):
        body = remainder
    return body.strip()


def extract_delimited_span(text: str, opening: str, closing: str) -> str | None:
    """Return the span from the first opening to the last closing delimiter."""

    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def _is_language_tag(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and re.fullmatch(r"[A-Za-z0-9_+.-]+", stripped) is not None


STRATEGIES: tuple[Strategy, ...] = (
    extract_verbatim,
    extract_fenced_block,
    extract_delimited_span,
)


def extract_json(text: str, expect: ExpectedShape = "array") -> str:
    """Recover the JSON array or object embedded in raw model output.

    Args:
        text: Raw assistant message content.
        expect: `array` or `object`, selecting the delimiters to look for.

    Returns:
        The recovered fragment, or the trimmed input when no strategy matches.
    """

    opening, closing = _delimiters(expect)
    for strategy in STRATEGIES:
        extracted = strategy(text, opening, closing)
        if extracted is not None:
            return extracted
    return text.strip()
