"""Normalization engine orchestration.

Responsibilities:
- Wire tokenizer, detector, special-case and hierarchical resolvers, formatter,
  and reconstructor into one pure text-in/text-out pipeline.
- Validate API input and optionally memoize outputs.
- Record unresolved expressions for diagnostics without failing the call.

Key types:
- `HebrewNormalizer`: engine bound to one lexicon and configuration.
"""

from __future__ import annotations

import threading

from ..config import NormalizerConfig
from ..models.datatypes import NormalizationReport, Replacement, UnresolvedExpression
from ..numerals.detector import ExpressionDetector
from ..numerals.formatter import NumberFormatter
from ..numerals.lexicon import Lexicon
from ..numerals.resolver import HierarchicalResolver
from ..numerals.special_cases import RuleContext, RuleMatch, SpecialCaseResolver
from ..parsing import require_text
from ..telemetry.logger import NormalizationLogger
from ..text.reconstructor import TextReconstructor
from ..text.tokenizer import Tokenizer
from .cache import NormalizationCache


class HebrewNormalizer:
    """Convert spelled-out Hebrew numerals in text to digits."""

    def __init__(
        self,
        config: NormalizerConfig | None = None,
        *,
        lexicon: Lexicon | None = None,
        special_cases: SpecialCaseResolver | None = None,
        logger: NormalizationLogger | None = None,
        cache: NormalizationCache | None = None,
    ) -> None:
        """Build the pipeline stages from injected tables and configuration."""

        self.config = config or NormalizerConfig()
        self.config.validate()
        self.lexicon = lexicon or Lexicon.default()
        self.tokenizer = Tokenizer()
        self.resolver = HierarchicalResolver()
        self.detector = ExpressionDetector(
            self.lexicon,
            resolver=self.resolver,
            max_window=self.config.max_window,
            weekday_nouns=self.config.weekday_nouns,
        )
        self.special_cases = special_cases or SpecialCaseResolver()
        self.formatter = NumberFormatter(self.config.thousands_separator)
        self.reconstructor = TextReconstructor()
        self.logger = logger or NormalizationLogger()
        if cache is None and self.config.cache_enabled:
            cache = NormalizationCache(max_entries=self.config.cache_size)
        self.cache = cache

    def normalize_text(self, text: str) -> str:
        """Return `text` with every resolvable numeral expression rendered as digits.

        Raises:
            InvalidInputError: If `text` is not a string.
        """

        return self._normalize_cached("text", require_text(text, "text"), standalone=False)

    def normalize_number(self, phrase: str) -> str:
        """Normalize a standalone numeral phrase.

        Ambiguous words (`אחד`, `שנים`) are accepted on their own here.
        Unresolvable phrases are returned unchanged.

        Raises:
            InvalidInputError: If `phrase` is not a string.
        """

        return self._normalize_cached("number", require_text(phrase, "phrase"), standalone=True)

    def normalize_with_report(
        self, text: str, *, standalone: bool = False
    ) -> NormalizationReport:
        """Normalize `text` and return replacements plus unresolved diagnostics."""

        require_text(text, "text")
        tokens = self.tokenizer.tokenize(text)
        expressions = self.detector.detect(text, tokens, allow_ambiguous=standalone)
        context = RuleContext(
            text=text,
            tokens=tokens,
            expressions=expressions,
            lexicon=self.lexicon,
            detector=self.detector,
            resolver=self.resolver,
            config=self.config,
        )

        replacements: list[Replacement] = []
        claimed: set[int] = set()
        for match in self.special_cases.scan(context):
            claimed.update(range(match.first_token_index, match.last_token_index + 1))
            replacements.append(
                Replacement(match.start_offset, match.end_offset, self._render_match(match))
            )
            self.logger.log_rule_applied(match.rule, match.start_offset, match.end_offset)

        unresolved: list[UnresolvedExpression] = []
        for expression in expressions:
            covered = range(expression.first_token_index, expression.last_token_index + 1)
            if any(index in claimed for index in covered):
                continue
            number = self.resolver.resolve_expression(expression)
            if number is None:
                unresolved.append(
                    UnresolvedExpression(
                        raw_text=expression.raw_text,
                        start_offset=expression.start_offset,
                        end_offset=expression.end_offset,
                    )
                )
                self.logger.log_unresolved(
                    expression.raw_text, expression.start_offset, expression.end_offset
                )
                continue
            replacements.append(
                Replacement(
                    expression.start_offset,
                    expression.end_offset,
                    self.formatter.format(number),
                )
            )

        replacements.sort(key=lambda replacement: replacement.start_offset)
        return NormalizationReport(
            normalized_text=self.reconstructor.reconstruct(text, replacements),
            replacements=tuple(replacements),
            unresolved=tuple(unresolved),
        )

    def _render_match(self, match: RuleMatch) -> str:
        rendered = self.formatter.format(match.number, group_digits=match.group_digits)
        if match.unit:
            return f"{rendered} {match.unit}"
        return rendered

    def _normalize_cached(self, operation: str, text: str, *, standalone: bool) -> str:
        if self.cache is None:
            return self.normalize_with_report(text, standalone=standalone).normalized_text

        cache_key = NormalizationCache.make_key(operation=operation, text=text)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        normalized = self.normalize_with_report(text, standalone=standalone).normalized_text
        self.cache.set(cache_key, normalized)
        return normalized


_default_normalizer: HebrewNormalizer | None = None
_default_lock = threading.Lock()


def default_normalizer() -> HebrewNormalizer:
    """Return the process-wide engine built from the default lexicon and config."""

    global _default_normalizer
    with _default_lock:
        if _default_normalizer is None:
            _default_normalizer = HebrewNormalizer()
        return _default_normalizer
