"""Shared parsing helpers for configuration value normalization."""

from __future__ import annotations


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_required_float(value: object, field_name: str) -> float:
    """Parse a numeric configuration value.

    Raises:
        ValueError: If the value is blank or not a number.
    """

    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a number.")
    if isinstance(value, int | float):
        return float(value)

    normalized = normalize_optional_string(value)
    if normalized is None:
        raise ValueError(f"`{field_name}` must be a number.")
    try:
        return float(normalized)
    except ValueError as exc:
        raise ValueError(f"`{field_name}` must be a number.") from exc


def parse_optional_float(value: object, field_name: str) -> float | None:
    """Parse an optional numeric value, returning `None` for blank input."""

    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_required_float(value, field_name)
