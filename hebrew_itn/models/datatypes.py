"""Core datatypes shared across normalization stages.

Responsibilities:
- Represent immutable records exchanged between tokenizer, detector, resolvers,
  formatter, and reconstructor.
- Provide explicit typing for offsets so replacements stay lossless.

Key types:
- `Token`, `NumeralLexeme`, `NumeralItem`, `NumberExpression`,
  `ResolvedNumber`, `Replacement`, `UnresolvedExpression`,
  and `NormalizationReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


UNIT = "unit"
TEEN = "teen"
TEN = "ten"
HUNDRED = "hundred"
THOUSAND = "thousand"
MILLION = "million"
BILLION = "billion"

SCALE_CLASSES = frozenset({UNIT, TEEN, TEN, HUNDRED, THOUSAND, MILLION, BILLION})
BASE_SCALE_CLASSES = frozenset({UNIT, TEEN, TEN})
_SCALE_MULTIPLIERS = {
    HUNDRED: 100,
    THOUSAND: 1_000,
    MILLION: 1_000_000,
    BILLION: 1_000_000_000,
}

MASCULINE = "masculine"
FEMININE = "feminine"
NEUTRAL = "neutral"
GENDERS = frozenset({MASCULINE, FEMININE, NEUTRAL})

CARDINAL = "cardinal"
CONSTRUCT = "construct"
ORDINAL = "ordinal"
CATEGORIES = frozenset({CARDINAL, CONSTRUCT, ORDINAL})

POSITIVE = "positive"
NEGATIVE = "negative"
FRACTIONAL_SUFFIXES = frozenset({".5", ".25", ".75"})


@dataclass(frozen=True, slots=True)
class Token:
    """A whitespace-delimited unit of the input text.

    Attributes:
        text: Raw token text, punctuation included.
        start_offset: Inclusive character offset in the source text.
        end_offset: Exclusive character offset in the source text.
        core_start_offset: Inclusive offset of the word without leading punctuation.
        core_end_offset: Exclusive offset of the word without trailing punctuation.
    """

    text: str
    start_offset: int
    end_offset: int
    core_start_offset: int
    core_end_offset: int

    @property
    def core(self) -> str:
        """Return the token text stripped of leading/trailing punctuation."""

        return self.text[
            self.core_start_offset - self.start_offset : self.core_end_offset - self.start_offset
        ]

    @property
    def has_leading_punctuation(self) -> bool:
        return self.core_start_offset > self.start_offset

    @property
    def has_trailing_punctuation(self) -> bool:
        return self.core_end_offset < self.end_offset


@dataclass(frozen=True, slots=True)
class NumeralLexeme:
    """One Hebrew numeral surface form and its numeric meaning.

    Attributes:
        surface_form: Space-separated word form, e.g. `שלוש עשרה`.
        value: Integer value contributed by the form on its own.
        scale_class: Multiplicative tier (`unit` ... `billion`).
        gender: Grammatical gender (`masculine`, `feminine`, or `neutral`).
        is_construct_form: Whether this is the construct-state form (`שלושת`).
        category: `cardinal`, `construct`, or `ordinal`.
        is_ambiguous: Whether the spelling is also an ordinary word (`שנים`, `אחד`).
        is_plural_scale: Whether the form only multiplies a preceding base (`מאות`).
    """

    surface_form: str
    value: int
    scale_class: str
    gender: str = NEUTRAL
    is_construct_form: bool = False
    category: str = CARDINAL
    is_ambiguous: bool = False
    is_plural_scale: bool = False

    @property
    def words(self) -> tuple[str, ...]:
        """Return the surface form split into words."""

        return tuple(self.surface_form.split())

    @property
    def is_base(self) -> bool:
        """Return whether the lexeme fills a unit/teen/ten slot."""

        return self.scale_class in BASE_SCALE_CLASSES

    @property
    def multiplier(self) -> int:
        """Return the factor applied when this scale word follows a base value."""

        return _SCALE_MULTIPLIERS.get(self.scale_class, 1)


@dataclass(frozen=True, slots=True)
class NumeralItem:
    """A lexeme occurrence inside a detected expression.

    Attributes:
        lexeme: Matched lexicon entry.
        conjoined: Whether a "ו" conjunction bridges this item to the previous one.
        first_token_index: Index of the first token covered by the lexeme.
        last_token_index: Index of the last token covered by the lexeme.
    """

    lexeme: NumeralLexeme
    conjoined: bool
    first_token_index: int
    last_token_index: int


@dataclass(frozen=True, slots=True)
class NumberExpression:
    """A maximal contiguous token span recognized as one numeral.

    Attributes:
        tokens: Tokens covered by the expression.
        start_offset: Inclusive character offset, past any stripped bound prefix.
        end_offset: Exclusive character offset, before trailing punctuation.
        raw_text: Source substring between the offsets.
        first_token_index: Index of the first covered token.
        last_token_index: Index of the last covered token.
        prefix: Bound prefix stripped from the first token (`ו`, `ב`, `מ`, ...).
        items: Lexeme occurrences in reading order.
    """

    tokens: tuple[Token, ...]
    start_offset: int
    end_offset: int
    raw_text: str
    first_token_index: int
    last_token_index: int
    prefix: str = ""
    items: tuple[NumeralItem, ...] = field(default_factory=tuple)

    @property
    def token_count(self) -> int:
        return self.last_token_index - self.first_token_index + 1

    def overlaps(self, other: NumberExpression) -> bool:
        """Return whether both expressions share at least one token."""

        return (
            self.first_token_index <= other.last_token_index
            and other.first_token_index <= self.last_token_index
        )


@dataclass(frozen=True, slots=True)
class ResolvedNumber:
    """Numeric value produced by a resolver.

    Attributes:
        integer_value: Non-negative integer magnitude.
        fractional_suffix: Optional literal suffix (`.5`, `.25`, `.75`).
        sign: `positive` or `negative`.
    """

    integer_value: int
    fractional_suffix: str | None = None
    sign: str = POSITIVE

    def negated(self) -> ResolvedNumber:
        """Return a copy with the opposite sign."""

        return replace(self, sign=POSITIVE if self.sign == NEGATIVE else NEGATIVE)


@dataclass(frozen=True, slots=True)
class Replacement:
    """A substitution of one source span by formatted digits."""

    start_offset: int
    end_offset: int
    formatted_text: str


@dataclass(frozen=True, slots=True)
class UnresolvedExpression:
    """Diagnostic record for a detected span the resolvers could not reduce."""

    raw_text: str
    start_offset: int
    end_offset: int


@dataclass(frozen=True, slots=True)
class NormalizationReport:
    """Structured output of one normalization call.

    Attributes:
        normalized_text: Text with every resolved numeral replaced by digits.
        replacements: Applied replacements ordered by start offset.
        unresolved: Detected expressions left unchanged.
    """

    normalized_text: str
    replacements: tuple[Replacement, ...] = field(default_factory=tuple)
    unresolved: tuple[UnresolvedExpression, ...] = field(default_factory=tuple)
