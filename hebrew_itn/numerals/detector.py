"""Numeral expression detection over a token stream.

Responsibilities:
- Test bounded token windows against the lexicon trie and the conjunction rules.
- Resolve overlapping candidates greedily (leftmost first, longest first).
- Coalesce touching expressions when a numeral is longer than the window.

Key types:
- `ExpressionDetector`: returns ordered, non-overlapping `NumberExpression` records.
"""

from __future__ import annotations

from typing import Sequence

from ..models.datatypes import NumberExpression, NumeralItem, Token
from .lexicon import Lexicon
from .resolver import HierarchicalResolver


GENERIC_PREFIXES = ("ו", "ב", "כ", "ל", "מ", "וב", "וכ", "ול", "ומ")
CONJUNCTION_PREFIXES = ("ו",)
DEFINITE_PREFIXES = ("ה", "וה")
CONJUNCTION_TOKENS = frozenset({"ו", "וה", "ה"})
DEFAULT_MAX_WINDOW = 5


class ExpressionDetector:
    """Find maximal numeral spans using bounded-window lexicon matching."""

    def __init__(
        self,
        lexicon: Lexicon,
        *,
        resolver: HierarchicalResolver | None = None,
        max_window: int = DEFAULT_MAX_WINDOW,
        weekday_nouns: Sequence[str] = (),
    ) -> None:
        """Initialize with a lexicon, a coherence resolver, and the window bound.

        A lone construct numeral right after one of `weekday_nouns` is a day name
        (`ביום שני`) and is not reported.
        """

        if max_window <= 0:
            raise ValueError("`max_window` must be a positive integer.")
        self._lexicon = lexicon
        self._resolver = resolver or HierarchicalResolver()
        self._max_window = max_window
        self._weekday_nouns = frozenset(weekday_nouns)

    @property
    def max_window(self) -> int:
        return self._max_window

    def detect(
        self, text: str, tokens: Sequence[Token], *, allow_ambiguous: bool = False
    ) -> list[NumberExpression]:
        """Return accepted expressions ordered by start offset.

        Args:
            text: Source text the tokens were produced from.
            tokens: Tokens of `text`.
            allow_ambiguous: Accept a lone ambiguous numeral word (standalone phrases).
        """

        candidates: list[NumberExpression] = []
        for size in range(min(self._max_window, len(tokens)), 0, -1):
            for start in range(len(tokens) - size + 1):
                expression = self.match_window(
                    text,
                    tokens,
                    start,
                    start + size,
                    allow_ambiguous=allow_ambiguous,
                )
                if expression is not None:
                    candidates.append(expression)

        candidates.sort(
            key=lambda candidate: (
                candidate.start_offset,
                candidate.start_offset - candidate.end_offset,
            )
        )
        accepted: list[NumberExpression] = []
        for candidate in candidates:
            if any(candidate.overlaps(other) for other in accepted):
                continue
            accepted.append(candidate)
        accepted.sort(key=lambda expression: expression.start_offset)
        return self._coalesce(text, tokens, accepted)

    def match_window(
        self,
        text: str,
        tokens: Sequence[Token],
        start: int,
        stop: int,
        *,
        first_prefixes: Sequence[str] = GENERIC_PREFIXES,
        allow_ambiguous: bool = False,
    ) -> NumberExpression | None:
        """Return the expression formed by `tokens[start:stop]`, or `None`.

        Trailing conjunction tokens are trimmed from the returned expression.
        """

        window = tokens[start:stop]
        if not window:
            return None

        last_offset = len(window) - 1
        prefix = ""
        stems: list[str] = []
        token_indices: list[int] = []
        bridged_flags: list[bool] = []
        pending_conjunction = False

        for offset, token in enumerate(window):
            word = token.core
            if not word:
                return None
            if offset > 0 and token.has_leading_punctuation:
                return None
            if offset < last_offset and token.has_trailing_punctuation:
                return None
            if offset > 0 and word in CONJUNCTION_TOKENS:
                if pending_conjunction:
                    return None
                pending_conjunction = True
                continue

            allowed = first_prefixes if offset == 0 else CONJUNCTION_PREFIXES
            split = self._lexicon.split_prefix(word, allowed)
            if split is None:
                return None
            word_prefix, stem = split
            if offset == 0:
                prefix = word_prefix
            elif pending_conjunction and word_prefix:
                return None
            stems.append(stem)
            token_indices.append(start + offset)
            bridged_flags.append(pending_conjunction or (offset > 0 and bool(word_prefix)))
            pending_conjunction = False

        items = self._segment(stems, token_indices, bridged_flags)
        if items is None:
            return None
        if len(items) == 1 and items[0].lexeme.is_ambiguous and not allow_ambiguous:
            return None
        if len(items) == 1 and self._names_weekday(tokens, start, items[0]):
            return None
        if not self.is_well_formed(items):
            return None

        last_index = items[-1].last_token_index
        start_offset = window[0].core_start_offset + len(prefix)
        end_offset = tokens[last_index].core_end_offset
        return NumberExpression(
            tokens=tuple(tokens[start : last_index + 1]),
            start_offset=start_offset,
            end_offset=end_offset,
            raw_text=text[start_offset:end_offset],
            first_token_index=start,
            last_token_index=last_index,
            prefix=prefix,
            items=items,
        )

    def _names_weekday(self, tokens: Sequence[Token], start: int, item: NumeralItem) -> bool:
        if not item.lexeme.is_construct_form or start == 0 or not self._weekday_nouns:
            return False
        previous = tokens[start - 1]
        if previous.has_trailing_punctuation:
            return False
        word = previous.core
        return word in self._weekday_nouns or any(
            word.startswith(prefix) and word[len(prefix):] in self._weekday_nouns
            for prefix in GENERIC_PREFIXES
        )

    @staticmethod
    def is_well_formed(items: Sequence[NumeralItem]) -> bool:
        """Check adjacency rules between consecutive lexemes.

        Two base values need a conjunction between them, and a plural scale
        noun must directly follow a base value.
        """

        previous: NumeralItem | None = None
        for item in items:
            lexeme = item.lexeme
            if lexeme.is_plural_scale and (
                previous is None or not previous.lexeme.is_base or item.conjoined
            ):
                return False
            if (
                previous is not None
                and lexeme.is_base
                and previous.lexeme.is_base
                and not item.conjoined
            ):
                return False
            previous = item
        return True

    def _segment(
        self,
        stems: Sequence[str],
        token_indices: Sequence[int],
        bridged_flags: Sequence[bool],
    ) -> tuple[NumeralItem, ...] | None:
        """Split stems into lexemes by longest trie match."""

        if not stems:
            return None
        joinable = [not flag for flag in bridged_flags]
        items: list[NumeralItem] = []
        index = 0
        while index < len(stems):
            match = self._lexicon.longest_match(stems, index, joinable=joinable)
            if match is None:
                return None
            lexeme, word_count = match
            items.append(
                NumeralItem(
                    lexeme=lexeme,
                    conjoined=bridged_flags[index],
                    first_token_index=token_indices[index],
                    last_token_index=token_indices[index + word_count - 1],
                )
            )
            index += word_count
        return tuple(items)

    def _coalesce(
        self, text: str, tokens: Sequence[Token], expressions: list[NumberExpression]
    ) -> list[NumberExpression]:
        """Merge touching expressions whose joint span exceeds the window."""

        merged: list[NumberExpression] = []
        for expression in expressions:
            if merged:
                joined = self._join(text, tokens, merged[-1], expression)
                if joined is not None:
                    merged[-1] = joined
                    continue
            merged.append(expression)
        return merged

    def _join(
        self,
        text: str,
        tokens: Sequence[Token],
        left: NumberExpression,
        right: NumberExpression,
    ) -> NumberExpression | None:
        gap = right.first_token_index - left.last_token_index - 1
        if gap not in (0, 1):
            return None
        if gap == 1:
            between = tokens[left.last_token_index + 1]
            if between.text not in CONJUNCTION_TOKENS or right.prefix:
                return None
        if right.last_token_index - left.first_token_index + 1 <= self._max_window:
            return None
        if tokens[left.last_token_index].has_trailing_punctuation:
            return None
        if right.tokens[0].has_leading_punctuation or right.prefix not in ("", "ו"):
            return None

        head = right.items[0]
        bridged = NumeralItem(
            lexeme=head.lexeme,
            conjoined=gap == 1 or right.prefix == "ו",
            first_token_index=head.first_token_index,
            last_token_index=head.last_token_index,
        )
        items = left.items + (bridged,) + right.items[1:]
        if not self.is_well_formed(items) or self._resolver.resolve(items) is None:
            return None

        return NumberExpression(
            tokens=tuple(tokens[left.first_token_index : right.last_token_index + 1]),
            start_offset=left.start_offset,
            end_offset=right.end_offset,
            raw_text=text[left.start_offset : right.end_offset],
            first_token_index=left.first_token_index,
            last_token_index=right.last_token_index,
            prefix=left.prefix,
            items=items,
        )
