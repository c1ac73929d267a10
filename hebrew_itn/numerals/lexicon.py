"""Hebrew numeral lexicon and its word trie.

Responsibilities:
- Hold the immutable table of cardinal, construct, and ordinal surface forms.
- Compile multi-word forms (teens) into a word trie for longest-match lookup.
- Split attached one-letter prefixes (`ו`, `ב`, `כ`, `ל`, `מ`, `ה`) off numeral words.

Key types:
- `Lexicon`: read-only lookup structure built once per engine.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..models.datatypes import (
    BILLION,
    CARDINAL,
    CATEGORIES,
    CONSTRUCT,
    FEMININE,
    GENDERS,
    HUNDRED,
    MASCULINE,
    MILLION,
    NEUTRAL,
    ORDINAL,
    SCALE_CLASSES,
    TEEN,
    TEN,
    THOUSAND,
    UNIT,
    NumeralLexeme,
)


_MASCULINE_UNITS = (
    ("אחד", 1),
    ("שניים", 2),
    ("שנים", 2),
    ("שלושה", 3),
    ("ארבעה", 4),
    ("חמישה", 5),
    ("שישה", 6),
    ("שבעה", 7),
    ("תשעה", 9),
)
_FEMININE_UNITS = (
    ("אחת", 1),
    ("שתיים", 2),
    ("שתים", 2),
    ("שלוש", 3),
    ("ארבע", 4),
    ("חמש", 5),
    ("שש", 6),
    ("שבע", 7),
    ("תשע", 9),
)
_TENS = (
    ("עשרים", 20),
    ("שלושים", 30),
    ("ארבעים", 40),
    ("חמישים", 50),
    ("שישים", 60),
    ("ששים", 60),
    ("שבעים", 70),
    ("שמונים", 80),
    ("תשעים", 90),
)
_CONSTRUCT_FORMS = (
    ("שני", 2, MASCULINE),
    ("שתי", 2, FEMININE),
    ("שלושת", 3, NEUTRAL),
    ("ארבעת", 4, NEUTRAL),
    ("חמשת", 5, NEUTRAL),
    ("ששת", 6, NEUTRAL),
    ("שבעת", 7, NEUTRAL),
    ("שמונת", 8, NEUTRAL),
    ("תשעת", 9, NEUTRAL),
)
_ORDINALS = (
    ("ראשון", 1, MASCULINE),
    ("שני", 2, MASCULINE),
    ("שלישי", 3, MASCULINE),
    ("רביעי", 4, MASCULINE),
    ("חמישי", 5, MASCULINE),
    ("שישי", 6, MASCULINE),
    ("שביעי", 7, MASCULINE),
    ("שמיני", 8, MASCULINE),
    ("תשיעי", 9, MASCULINE),
    ("עשירי", 10, MASCULINE),
    ("ראשונה", 1, FEMININE),
    ("שניה", 2, FEMININE),
    ("שנייה", 2, FEMININE),
    ("שלישית", 3, FEMININE),
    ("רביעית", 4, FEMININE),
    ("חמישית", 5, FEMININE),
    ("שישית", 6, FEMININE),
    ("שביעית", 7, FEMININE),
    ("שמינית", 8, FEMININE),
    ("תשיעית", 9, FEMININE),
    ("עשירית", 10, FEMININE),
)
# Spellings that double as ordinary words ("years", "someone").
_AMBIGUOUS_FORMS = frozenset({"שנים", "אחד", "אחת"})


def _build_default_lexemes() -> list[NumeralLexeme]:
    """Return the built-in numeral table."""

    lexemes: list[NumeralLexeme] = [NumeralLexeme("אפס", 0, UNIT)]

    for form, value in _MASCULINE_UNITS:
        lexemes.append(
            NumeralLexeme(form, value, UNIT, MASCULINE, is_ambiguous=form in _AMBIGUOUS_FORMS)
        )
    for form, value in _FEMININE_UNITS:
        lexemes.append(
            NumeralLexeme(form, value, UNIT, FEMININE, is_ambiguous=form in _AMBIGUOUS_FORMS)
        )
    lexemes.append(NumeralLexeme("שמונה", 8, UNIT, NEUTRAL))
    lexemes.append(NumeralLexeme("עשרה", 10, TEN, MASCULINE))
    lexemes.append(NumeralLexeme("עשר", 10, TEN, FEMININE))

    # Teens pair a masculine unit with `עשר` and a feminine unit with `עשרה`.
    for form, value in _MASCULINE_UNITS:
        lexemes.append(NumeralLexeme(f"{form} עשר", value + 10, TEEN, MASCULINE))
    for form, value in _FEMININE_UNITS:
        lexemes.append(NumeralLexeme(f"{form} עשרה", value + 10, TEEN, FEMININE))
    lexemes.append(NumeralLexeme("שמונה עשר", 18, TEEN, MASCULINE))
    lexemes.append(NumeralLexeme("שמונה עשרה", 18, TEEN, FEMININE))

    for form, value in _TENS:
        lexemes.append(NumeralLexeme(form, value, TEN))

    for form, value, gender in _CONSTRUCT_FORMS:
        lexemes.append(
            NumeralLexeme(form, value, UNIT, gender, is_construct_form=True, category=CONSTRUCT)
        )
    lexemes.append(
        NumeralLexeme("עשרת", 10, TEN, NEUTRAL, is_construct_form=True, category=CONSTRUCT)
    )

    lexemes.extend(
        [
            NumeralLexeme("מאה", 100, HUNDRED),
            NumeralLexeme("מאתיים", 200, HUNDRED),
            NumeralLexeme("מאתים", 200, HUNDRED),
            NumeralLexeme("מאות", 100, HUNDRED, is_plural_scale=True),
            NumeralLexeme("אלף", 1_000, THOUSAND),
            NumeralLexeme("אלפיים", 2_000, THOUSAND),
            NumeralLexeme("אלפים", 1_000, THOUSAND, is_plural_scale=True),
            NumeralLexeme("מיליון", 1_000_000, MILLION),
            NumeralLexeme("מיליונים", 1_000_000, MILLION, is_plural_scale=True),
            NumeralLexeme("מיליארד", 1_000_000_000, BILLION),
            NumeralLexeme("מיליארדים", 1_000_000_000, BILLION, is_plural_scale=True),
        ]
    )

    for form, value, gender in _ORDINALS:
        lexemes.append(NumeralLexeme(form, value, UNIT, gender, category=ORDINAL))
    return lexemes


class _TrieNode:
    """One word step in the lexicon trie."""

    __slots__ = ("children", "lexeme")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.lexeme: NumeralLexeme | None = None


class Lexicon:
    """Immutable numeral lookup table compiled into a word trie."""

    def __init__(self, lexemes: Iterable[NumeralLexeme]) -> None:
        """Validate entries and compile cardinal/construct forms into the trie."""

        self._root = _TrieNode()
        self._ordinals: dict[str, NumeralLexeme] = {}
        self._phrases: dict[tuple[str, ...], NumeralLexeme] = {}
        words: set[str] = set()

        for lexeme in lexemes:
            self._validate(lexeme)
            if lexeme.category == ORDINAL:
                self._ordinals[lexeme.surface_form] = lexeme
                continue
            phrase = lexeme.words
            if phrase in self._phrases:
                raise ValueError(f"Duplicate numeral surface form `{lexeme.surface_form}`.")
            self._phrases[phrase] = lexeme
            words.update(phrase)
            node = self._root
            for word in phrase:
                node = node.children.setdefault(word, _TrieNode())
            node.lexeme = lexeme

        self._words = frozenset(words)

    @classmethod
    def default(cls) -> Lexicon:
        """Build the lexicon from the built-in Hebrew numeral table."""

        return cls(_build_default_lexemes())

    @staticmethod
    def _validate(lexeme: NumeralLexeme) -> None:
        if not lexeme.words:
            raise ValueError("Numeral surface form must not be blank.")
        if lexeme.scale_class not in SCALE_CLASSES:
            raise ValueError(f"Unsupported scale class `{lexeme.scale_class}`.")
        if lexeme.gender not in GENDERS:
            raise ValueError(f"Unsupported gender `{lexeme.gender}`.")
        if lexeme.category not in CATEGORIES:
            raise ValueError(f"Unsupported category `{lexeme.category}`.")
        if lexeme.value < 0:
            raise ValueError(f"Numeral `{lexeme.surface_form}` must have a non-negative value.")

    def __len__(self) -> int:
        return len(self._phrases) + len(self._ordinals)

    def __contains__(self, phrase: object) -> bool:
        if not isinstance(phrase, str):
            return False
        return self.lookup(phrase) is not None

    def lookup(self, phrase: str) -> NumeralLexeme | None:
        """Return the cardinal/construct lexeme for an exact (whitespace-normalized) phrase."""

        return self._phrases.get(tuple(phrase.split()))

    def ordinal(self, word: str) -> NumeralLexeme | None:
        """Return the ordinal lexeme for a single word."""

        return self._ordinals.get(word)

    def is_numeral_word(self, word: str) -> bool:
        """Return whether the word occurs in any cardinal or construct form."""

        return word in self._words

    def split_prefix(self, word: str, prefixes: Sequence[str]) -> tuple[str, str] | None:
        """Split an allowed attached prefix off a numeral word.

        The bare word wins over a prefixed reading, and shorter prefixes are
        tried before longer ones.

        Returns:
            `(prefix, stem)` where `stem` is a numeral word, or `None`.
        """

        if self.is_numeral_word(word):
            return "", word
        for prefix in sorted(prefixes, key=len):
            if len(word) > len(prefix) and word.startswith(prefix):
                stem = word[len(prefix):]
                if self.is_numeral_word(stem):
                    return prefix, stem
        return None

    def longest_match(
        self, words: Sequence[str], start: int, *, joinable: Sequence[bool] | None = None
    ) -> tuple[NumeralLexeme, int] | None:
        """Find the longest lexicon phrase starting at `words[start]`.

        Args:
            words: Candidate numeral words (prefixes already stripped).
            start: Index of the first word to match.
            joinable: Optional flags; `joinable[i]` is false when word `i` cannot
                continue a multi-word phrase (it carries its own prefix or follows
                a conjunction).

        Returns:
            `(lexeme, word_count)` for the longest match, or `None`.
        """

        node = self._root
        best: tuple[NumeralLexeme, int] | None = None
        for index in range(start, len(words)):
            if index > start and joinable is not None and not joinable[index]:
                break
            child = node.children.get(words[index])
            if child is None:
                break
            node = child
            if node.lexeme is not None:
                best = (node.lexeme, index - start + 1)
        return best
