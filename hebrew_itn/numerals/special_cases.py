"""Ordered special-case rules for Hebrew numeral idioms.

Responsibilities:
- Recognize context-triggered numerals (platform numbers, years, fractions,
  negatives, prefixed ordinals) before generic resolution runs.
- Claim token ranges so the generic resolver skips overlapping expressions.

Key types:
- `SpecialCaseRule`: protocol for one rule in the ordered table.
- `RuleContext`: read-only view of one normalization call.
- `RuleMatch`: a claimed span with its resolved value and rendering options.
- `SpecialCaseResolver`: scans tokens and applies the first matching rule.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Collection, Protocol, Sequence

from ..config import NormalizerConfig
from ..models.datatypes import NEGATIVE, NumberExpression, ResolvedNumber, Token
from .detector import DEFINITE_PREFIXES, GENERIC_PREFIXES, ExpressionDetector
from .lexicon import Lexicon
from .resolver import HierarchicalResolver


_CONTEXT_PREFIXES = GENERIC_PREFIXES + ("ה", "וה")
_MONTH_PREFIXES = ("ב", "ל")
_FRACTION_WORDS = {"וחצי": ".5", "ורבע": ".25"}
_THREE_QUARTERS = ("ושלושת", "רבעי")


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """A span claimed by a special-case rule.

    Attributes:
        rule: Name of the rule that produced the match.
        first_token_index: First claimed token.
        last_token_index: Last claimed token.
        start_offset: Inclusive offset of the replaced text.
        end_offset: Exclusive offset of the replaced text.
        number: Resolved value.
        group_digits: Whether thousands separators are rendered.
        unit: Optional unit word appended after the digits.
    """

    rule: str
    first_token_index: int
    last_token_index: int
    start_offset: int
    end_offset: int
    number: ResolvedNumber
    group_digits: bool = True
    unit: str | None = None


class RuleContext:
    """Read-only inputs shared by all rules for one normalization call."""

    def __init__(
        self,
        *,
        text: str,
        tokens: Sequence[Token],
        expressions: Sequence[NumberExpression],
        lexicon: Lexicon,
        detector: ExpressionDetector,
        resolver: HierarchicalResolver,
        config: NormalizerConfig,
    ) -> None:
        self.text = text
        self.tokens = tuple(tokens)
        self.expressions = tuple(expressions)
        self.lexicon = lexicon
        self.detector = detector
        self.resolver = resolver
        self.config = config
        self._by_first_token = {
            expression.first_token_index: expression for expression in self.expressions
        }

    def expression_at(self, index: int) -> NumberExpression | None:
        """Return the detected expression starting at token `index`."""

        return self._by_first_token.get(index)

    def token(self, index: int) -> Token | None:
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None


class SpecialCaseRule(Protocol):
    """Protocol for one special-case rule."""

    name: str

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        """Return a match anchored at token `index`, or `None`."""


def _split_known(
    word: str, vocabulary: Collection[str], prefixes: Sequence[str] = _CONTEXT_PREFIXES
) -> tuple[str, str] | None:
    """Return `(prefix, stem)` when `word` is a vocabulary word behind an optional prefix."""

    if word in vocabulary:
        return "", word
    for prefix in sorted(prefixes, key=len):
        stem = word[len(prefix):]
        if word.startswith(prefix) and stem and stem in vocabulary:
            return prefix, stem
    return None


def _fraction_at(context: RuleContext, index: int) -> tuple[str, int] | None:
    """Return `(suffix, last_token_index)` for a fraction phrase starting at `index`."""

    token = context.token(index)
    if token is None or token.has_leading_punctuation:
        return None
    suffix = _FRACTION_WORDS.get(token.core)
    if suffix is not None:
        return suffix, index
    following = context.token(index + 1)
    if (
        token.core == _THREE_QUARTERS[0]
        and not token.has_trailing_punctuation
        and following is not None
        and following.core == _THREE_QUARTERS[1]
        and not following.has_leading_punctuation
    ):
        return ".75", index + 1
    return None


class ForcedHeadNounRule:
    """Convert the single numeral word after a head noun (`ברציף שמונה`)."""

    name = "forced-head-noun"

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        head = context.tokens[index]
        target = context.token(index + 1)
        if target is None or head.has_trailing_punctuation or target.has_leading_punctuation:
            return None
        if _split_known(head.core, context.config.head_nouns) is None:
            return None

        lexeme = context.lexicon.lookup(target.core)
        if lexeme is None or lexeme.is_plural_scale:
            return None
        expression = context.expression_at(index + 1)
        if expression is not None and expression.token_count > 1:
            return None
        return RuleMatch(
            rule=self.name,
            first_token_index=index + 1,
            last_token_index=index + 1,
            start_offset=target.core_start_offset,
            end_offset=target.core_end_offset,
            number=ResolvedNumber(integer_value=lexeme.value),
        )


class YearRule:
    """Render `בשנת <numeral>` as four digits without a separator."""

    name = "year"

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        marker = context.tokens[index]
        if marker.has_trailing_punctuation:
            return None
        if _split_known(marker.core, context.config.year_markers) is None:
            return None

        expression = context.expression_at(index + 1)
        if expression is None or expression.prefix:
            return None
        value = context.resolver.resolve(expression.items)
        if value is None or not 1000 <= value <= 9999:
            return None
        return RuleMatch(
            rule=self.name,
            first_token_index=expression.first_token_index,
            last_token_index=expression.last_token_index,
            start_offset=expression.start_offset,
            end_offset=expression.end_offset,
            number=ResolvedNumber(integer_value=value),
            group_digits=False,
        )


class FractionRule:
    """Resolve `<unit> וחצי` and `<numeral> [<units>] וחצי` style fractions."""

    name = "fraction"

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        return self._match_unit_noun(context, index) or self._match_expression(context, index)

    def _match_unit_noun(self, context: RuleContext, index: int) -> RuleMatch | None:
        """Match a singular unit noun directly followed by a fraction (`שעה וחצי`)."""

        token = context.tokens[index]
        if token.has_trailing_punctuation:
            return None
        split = _split_known(token.core, context.config.unit_plurals, GENERIC_PREFIXES)
        if split is None:
            return None
        fraction = _fraction_at(context, index + 1)
        if fraction is None:
            return None

        prefix, unit = split
        suffix, last_index = fraction
        return RuleMatch(
            rule=self.name,
            first_token_index=index,
            last_token_index=last_index,
            start_offset=token.core_start_offset + len(prefix),
            end_offset=context.tokens[last_index].core_end_offset,
            number=ResolvedNumber(integer_value=1, fractional_suffix=suffix),
            unit=context.config.unit_plurals[unit],
        )

    def _match_expression(self, context: RuleContext, index: int) -> RuleMatch | None:
        """Match a detected numeral followed by an optional plural unit and a fraction."""

        expression = context.expression_at(index)
        if expression is None:
            return None

        items = expression.items
        last_token = context.tokens[expression.last_token_index]
        after = expression.last_token_index + 1
        following = context.token(after)
        unit: str | None = None

        # "ושלושת רבעי" is detected as a trailing construct numeral.
        if (
            len(items) > 1
            and last_token.core == _THREE_QUARTERS[0]
            and items[-1].first_token_index == expression.last_token_index
            and following is not None
            and following.core == _THREE_QUARTERS[1]
        ):
            items = items[:-1]
            suffix, last_index = ".75", after
        else:
            if last_token.has_trailing_punctuation:
                return None
            fraction = _fraction_at(context, after)
            if fraction is None:
                if (
                    following is None
                    or following.has_leading_punctuation
                    or following.has_trailing_punctuation
                    or following.core not in context.config.plural_units
                ):
                    return None
                fraction = _fraction_at(context, after + 1)
                if fraction is None:
                    return None
                unit = following.core
            suffix, last_index = fraction

        value = context.resolver.resolve(items)
        if value is None:
            return None
        return RuleMatch(
            rule=self.name,
            first_token_index=expression.first_token_index,
            last_token_index=last_index,
            start_offset=expression.start_offset,
            end_offset=context.tokens[last_index].core_end_offset,
            number=ResolvedNumber(integer_value=value, fractional_suffix=suffix),
            unit=unit,
        )


class NegativeMarkerRule:
    """Negate the numeral after `מינוס`."""

    name = "negative"

    def __init__(self, fraction_rule: FractionRule | None = None) -> None:
        self._fraction_rule = fraction_rule or FractionRule()

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        marker = context.tokens[index]
        operand = context.token(index + 1)
        if operand is None or marker.has_trailing_punctuation:
            return None
        if marker.core not in context.config.negative_markers:
            return None

        fraction = self._fraction_rule.match(context, index + 1)
        if fraction is not None and fraction.start_offset == operand.core_start_offset:
            return replace(
                fraction,
                rule=self.name,
                first_token_index=index,
                start_offset=marker.core_start_offset,
                number=fraction.number.negated(),
            )

        expression = context.expression_at(index + 1)
        if expression is None or expression.prefix:
            return None
        value = context.resolver.resolve(expression.items)
        if value is None:
            return None
        return RuleMatch(
            rule=self.name,
            first_token_index=index,
            last_token_index=expression.last_token_index,
            start_offset=marker.core_start_offset,
            end_offset=expression.end_offset,
            number=ResolvedNumber(integer_value=value, sign=NEGATIVE),
        )


class OrdinalWithPrefixRule:
    """Render `ה` + numeral as `ה-<digits>` in ranking or date context.

    Ordinals qualify after a ranking noun (`במקום השלישי`) or before a month;
    cardinals qualify only before a month (`העשרים ושלושה במרץ`).
    """

    name = "ordinal-with-prefix"

    def match(self, context: RuleContext, index: int) -> RuleMatch | None:
        return self._match_ordinal(context, index) or self._match_date_cardinal(context, index)

    def _match_ordinal(self, context: RuleContext, index: int) -> RuleMatch | None:
        token = context.tokens[index]
        if token.has_leading_punctuation:
            return None
        for prefix in DEFINITE_PREFIXES:
            if not token.core.startswith(prefix):
                continue
            lexeme = context.lexicon.ordinal(token.core[len(prefix):])
            if lexeme is None:
                continue
            if not (
                self._follows_ranking_noun(context, index) or self._precedes_month(context, index)
            ):
                return None
            return RuleMatch(
                rule=self.name,
                first_token_index=index,
                last_token_index=index,
                start_offset=token.core_start_offset + len(prefix),
                end_offset=token.core_end_offset,
                number=ResolvedNumber(integer_value=lexeme.value),
            )
        return None

    def _match_date_cardinal(self, context: RuleContext, index: int) -> RuleMatch | None:
        if not context.tokens[index].core.startswith(DEFINITE_PREFIXES):
            return None
        limit = min(index + context.detector.max_window, len(context.tokens) - 1)
        for stop in range(limit, index, -1):
            if not self._is_month(context, stop):
                continue
            if context.tokens[stop - 1].has_trailing_punctuation:
                continue
            expression = context.detector.match_window(
                context.text,
                context.tokens,
                index,
                stop,
                first_prefixes=DEFINITE_PREFIXES,
                allow_ambiguous=True,
            )
            if (
                expression is None
                or not expression.prefix
                or expression.last_token_index != stop - 1
            ):
                continue
            value = context.resolver.resolve(expression.items)
            if value is None:
                continue
            return RuleMatch(
                rule=self.name,
                first_token_index=index,
                last_token_index=expression.last_token_index,
                start_offset=expression.start_offset,
                end_offset=expression.end_offset,
                number=ResolvedNumber(integer_value=value),
            )
        return None

    @staticmethod
    def _follows_ranking_noun(context: RuleContext, index: int) -> bool:
        previous = context.token(index - 1)
        if previous is None or previous.has_trailing_punctuation:
            return False
        return _split_known(previous.core, context.config.ranking_nouns) is not None

    def _precedes_month(self, context: RuleContext, index: int) -> bool:
        if context.tokens[index].has_trailing_punctuation:
            return False
        return self._is_month(context, index + 1)

    @staticmethod
    def _is_month(context: RuleContext, index: int) -> bool:
        token = context.token(index)
        if token is None or token.has_leading_punctuation:
            return False
        return _split_known(token.core, context.config.month_names, _MONTH_PREFIXES) is not None


class SpecialCaseResolver:
    """Scan tokens left to right and apply the first matching rule at each anchor."""

    def __init__(self, rules: list[SpecialCaseRule] | None = None) -> None:
        """Initialize with custom rules or the default priority order."""

        fraction_rule = FractionRule()
        self.rules: list[SpecialCaseRule] = rules or [
            ForcedHeadNounRule(),
            YearRule(),
            fraction_rule,
            NegativeMarkerRule(fraction_rule),
            OrdinalWithPrefixRule(),
        ]

    def match_at(self, context: RuleContext, index: int) -> RuleMatch | None:
        """Return the first rule match anchored at `index`."""

        for rule in self.rules:
            match = rule.match(context, index)
            if match is not None:
                return match
        return None

    def scan(self, context: RuleContext) -> list[RuleMatch]:
        """Return non-overlapping matches ordered by position."""

        matches: list[RuleMatch] = []
        index = 0
        while index < len(context.tokens):
            match = self.match_at(context, index)
            if match is None:
                index += 1
                continue
            matches.append(match)
            index = match.last_token_index + 1
        return matches
