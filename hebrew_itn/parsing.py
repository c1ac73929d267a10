"""Shared parsing helpers for API input and configuration value normalization."""

from __future__ import annotations

from .errors import InvalidInputError


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def require_text(value: object, argument: str) -> str:
    """Return `value` unchanged when it is a string.

    Args:
        value: Caller-supplied input.
        argument: Parameter name used in the error message.

    Raises:
        InvalidInputError: If the value is `None` or not a string.
    """

    if isinstance(value, str):
        return value
    received = "None" if value is None else type(value).__name__
    raise InvalidInputError(f"`{argument}` must be a string, got {received}.")


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


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None
