"""Unit tests for shared parsing helpers."""

from __future__ import annotations

import pytest

from hebrew_itn.errors import InvalidInputError
from hebrew_itn.parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    require_text,
)


def test_require_text_returns_strings_unchanged() -> None:
    assert require_text("  חמש  ", "text") == "  חמש  "
    assert require_text("", "text") == ""


@pytest.mark.parametrize(("value", "received"), [(None, "None"), (5, "int"), (b"x", "bytes")])
def test_require_text_rejects_non_strings(value: object, received: str) -> None:
    """Non-string input is API misuse and raises a TypeError subclass."""

    with pytest.raises(InvalidInputError) as exc_info:
        require_text(value, "text")

    assert isinstance(exc_info.value, TypeError)
    assert str(exc_info.value) == f"`text` must be a string, got {received}."


def test_normalize_optional_string_trims_and_drops_blank_values() -> None:
    assert normalize_optional_string("  רציף ") == "רציף"
    assert normalize_optional_string("   ") is None
    assert normalize_optional_string(None) is None
    assert normalize_optional_string(12) == "12"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        ("YES", True),
        (" on ", True),
        ("0", False),
        ("off", False),
        ("maybe", None),
        ("", None),
    ],
)
def test_parse_permissive_boolean(value: object, expected: bool | None) -> None:
    assert parse_permissive_boolean(value) is expected
