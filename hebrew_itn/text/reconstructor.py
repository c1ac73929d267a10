"""Lossless text reconstruction from replacements.

Responsibilities:
- Splice formatted digits into the source text right-to-left.
- Hyphenate digits after an attached bound prefix (`ב-3`, `מ-5,000`) or a
  conjunction (`ו-5,302`).
"""

from __future__ import annotations

import re
from typing import Iterable

from ..models.datatypes import Replacement


# Prefix letters glued to the replaced word, at a word boundary.
_ATTACHED_PREFIX_RE = re.compile(r"(?<!\w)(?:ו?[בכלמה]|ו)$")
# A standalone "ו" token followed only by blanks.
_DETACHED_CONJUNCTION_RE = re.compile(r"(?<!\w)ו[ \t]+$")


class TextReconstructor:
    """Apply non-overlapping replacements and prefix hyphenation."""

    def reconstruct(self, text: str, replacements: Iterable[Replacement]) -> str:
        """Return `text` with every replacement applied.

        Characters outside replacement spans are copied unchanged, except the
        blanks between a standalone "ו" and the digits that follow it.

        Raises:
            ValueError: If replacements overlap or fall outside the text.
        """

        ordered = sorted(replacements, key=lambda item: item.start_offset)
        previous_end = 0
        for replacement in ordered:
            if replacement.start_offset < previous_end:
                raise ValueError("Replacements must not overlap.")
            if replacement.end_offset < replacement.start_offset:
                raise ValueError("Replacement end offset precedes its start offset.")
            previous_end = replacement.end_offset
        if previous_end > len(text):
            raise ValueError("Replacement offsets exceed the source text.")

        result = text
        for replacement in reversed(ordered):
            start = replacement.start_offset
            head = text[:start]
            hyphen = ""
            detached = _DETACHED_CONJUNCTION_RE.search(head)
            if detached is not None:
                start = detached.start() + 1
                hyphen = "-"
            elif _ATTACHED_PREFIX_RE.search(head) is not None:
                hyphen = "-"
            result = f"{result[:start]}{hyphen}{replacement.formatted_text}{result[replacement.end_offset:]}"
        return result
