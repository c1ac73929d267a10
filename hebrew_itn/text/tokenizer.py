"""Offset-preserving word tokenizer.

Responsibilities:
- Split text into whitespace-delimited tokens with exact character offsets.
- Mark leading/trailing punctuation so it is excluded from numeral matching
  yet kept inside the token span for lossless reconstruction.
"""

from __future__ import annotations

import re

from ..models.datatypes import Token


_WORD_RE = re.compile(r"\S+")
_LEADING_PUNCTUATION = frozenset("\"'([{«“„")
_TRAILING_PUNCTUATION = frozenset(".,;:!?)]}\"'»”…")


class Tokenizer:
    """Split text into `Token` records; never raises for string input."""

    def tokenize(self, text: str) -> list[Token]:
        """Return tokens for every non-whitespace run in `text`."""

        tokens: list[Token] = []
        for match in _WORD_RE.finditer(text):
            start, end = match.span()
            core_start = start
            core_end = end
            while core_start < core_end and text[core_start] in _LEADING_PUNCTUATION:
                core_start += 1
            while core_end > core_start and text[core_end - 1] in _TRAILING_PUNCTUATION:
                core_end -= 1
            tokens.append(
                Token(
                    text=match.group(0),
                    start_offset=start,
                    end_offset=end,
                    core_start_offset=core_start,
                    core_end_offset=core_end,
                )
            )
        return tokens
