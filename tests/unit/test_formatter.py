"""Unit tests for digit rendering."""

from __future__ import annotations

import pytest

from hebrew_itn.models.datatypes import NEGATIVE, ResolvedNumber
from hebrew_itn.numerals.formatter import NumberFormatter


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, "0"), (999, "999"), (1000, "1,000"), (3257, "3,257"), (2_000_000, "2,000,000")],
)
def test_formatter_groups_every_three_digits(value: int, expected: str) -> None:
    assert NumberFormatter().format(ResolvedNumber(value)) == expected


def test_formatter_renders_years_fractions_and_signs() -> None:
    """Grouping can be disabled; sign and fraction wrap the digits."""

    formatter = NumberFormatter()

    assert formatter.format(ResolvedNumber(1945), group_digits=False) == "1945"
    assert formatter.format(ResolvedNumber(1, fractional_suffix=".5")) == "1.5"
    assert formatter.format(ResolvedNumber(5, sign=NEGATIVE)) == "-5"
    assert formatter.format(ResolvedNumber(1200, ".75", NEGATIVE)) == "-1,200.75"


def test_formatter_uses_configured_separator() -> None:
    formatter = NumberFormatter(" ")

    assert formatter.format(ResolvedNumber(1200)) == "1 200"
    assert formatter.group("1234567") == "1 234 567"


def test_formatter_rejects_invalid_values() -> None:
    formatter = NumberFormatter()

    with pytest.raises(ValueError, match="fractional suffix"):
        formatter.format(ResolvedNumber(1, fractional_suffix=".3"))
    with pytest.raises(ValueError, match="non-negative"):
        formatter.format(ResolvedNumber(-1))
