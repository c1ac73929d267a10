"""Digit rendering for resolved numbers."""

from __future__ import annotations

from ..models.datatypes import FRACTIONAL_SUFFIXES, NEGATIVE, ResolvedNumber


DEFAULT_THOUSANDS_SEPARATOR = ","


class NumberFormatter:
    """Render `ResolvedNumber` values as canonical digit strings."""

    def __init__(self, thousands_separator: str = DEFAULT_THOUSANDS_SEPARATOR) -> None:
        self._separator = thousands_separator

    def format(self, number: ResolvedNumber, *, group_digits: bool = True) -> str:
        """Return digits with optional thousands grouping, fraction, and sign.

        Args:
            number: Value to render.
            group_digits: Insert the separator every three digits; disabled for years.
        """

        if number.integer_value < 0:
            raise ValueError("Resolved integer magnitude must be non-negative.")
        suffix = number.fractional_suffix or ""
        if suffix and suffix not in FRACTIONAL_SUFFIXES:
            raise ValueError(f"Unsupported fractional suffix `{suffix}`.")

        digits = str(number.integer_value)
        if group_digits:
            digits = self.group(digits)
        sign = "-" if number.sign == NEGATIVE else ""
        return f"{sign}{digits}{suffix}"

    def group(self, digits: str) -> str:
        """Insert the separator every three digits counted from the right."""

        head_length = len(digits) % 3 or 3
        groups = [digits[:head_length]]
        groups.extend(digits[index : index + 3] for index in range(head_length, len(digits), 3))
        return self._separator.join(groups)
