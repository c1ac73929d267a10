"""Unit tests for the numeral lexicon, its trie, and prefix splitting."""

from __future__ import annotations

import pytest

from hebrew_itn.models.datatypes import (
    CONSTRUCT,
    FEMININE,
    HUNDRED,
    ORDINAL,
    TEEN,
    UNIT,
    NumeralLexeme,
)
from hebrew_itn.numerals.detector import CONJUNCTION_PREFIXES, GENERIC_PREFIXES
from hebrew_itn.numerals.lexicon import Lexicon


def test_lookup_returns_cardinal_units_with_gender(lexicon: Lexicon) -> None:
    """Feminine unit forms should resolve to their value and scale class."""

    lexeme = lexicon.lookup("חמש")

    assert lexeme is not None
    assert lexeme.value == 5
    assert lexeme.scale_class == UNIT
    assert lexeme.gender == FEMININE


def test_lookup_resolves_multi_word_teens(lexicon: Lexicon) -> None:
    """Teens are two-word phrases compiled into the trie."""

    lexeme = lexicon.lookup("שבע  עשרה")

    assert lexeme is not None
    assert lexeme.value == 17
    assert lexeme.scale_class == TEEN


def test_construct_and_ordinal_forms_are_kept_apart(lexicon: Lexicon) -> None:
    """`שני` is both a construct cardinal and an ordinal; each table answers separately."""

    construct = lexicon.lookup("שני")
    ordinal = lexicon.ordinal("שני")

    assert construct is not None and construct.category == CONSTRUCT
    assert construct.is_construct_form is True
    assert ordinal is not None and ordinal.category == ORDINAL
    assert construct.value == ordinal.value == 2
    assert lexicon.ordinal("שלישית") is not None
    assert "שלישי" not in lexicon


def test_ambiguous_and_plural_scale_flags(lexicon: Lexicon) -> None:
    """Ambiguous spellings and plural scale nouns carry their flags."""

    assert lexicon.lookup("אחד").is_ambiguous is True
    assert lexicon.lookup("שנים").is_ambiguous is True
    assert lexicon.lookup("שניים").is_ambiguous is False
    hundreds = lexicon.lookup("מאות")
    assert hundreds.scale_class == HUNDRED
    assert hundreds.is_plural_scale is True
    assert lexicon.lookup("מאתיים").value == 200


def test_split_prefix_prefers_bare_word_then_shortest_prefix(lexicon: Lexicon) -> None:
    """Prefix splitting should keep bare numerals intact and strip allowed prefixes."""

    assert lexicon.split_prefix("שלושה", GENERIC_PREFIXES) == ("", "שלושה")
    assert lexicon.split_prefix("וחמישה", GENERIC_PREFIXES) == ("ו", "חמישה")
    assert lexicon.split_prefix("ומחמש", GENERIC_PREFIXES) == ("ומ", "חמש")
    assert lexicon.split_prefix("בשלושה", CONJUNCTION_PREFIXES) is None
    assert lexicon.split_prefix("בית", GENERIC_PREFIXES) is None


def test_longest_match_respects_joinable_flags(lexicon: Lexicon) -> None:
    """A word bridged by a conjunction must not continue a multi-word phrase."""

    words = ["שבע", "עשרה"]

    joined = lexicon.longest_match(words, 0)
    split = lexicon.longest_match(words, 0, joinable=[True, False])

    assert joined is not None
    assert joined[0].value == 17 and joined[1] == 2
    assert split is not None
    assert split[0].value == 7 and split[1] == 1
    assert lexicon.longest_match(["שלום"], 0) is None


def test_lexicon_rejects_duplicates_and_invalid_entries() -> None:
    """Custom tables are validated at construction."""

    with pytest.raises(ValueError, match="Duplicate numeral surface form"):
        Lexicon([NumeralLexeme("חמש", 5, UNIT), NumeralLexeme("חמש", 5, UNIT)])
    with pytest.raises(ValueError, match="Unsupported scale class"):
        Lexicon([NumeralLexeme("חמש", 5, "dozen")])
    with pytest.raises(ValueError, match="non-negative"):
        Lexicon([NumeralLexeme("חמש", -5, UNIT)])


def test_custom_lexicon_is_injectable() -> None:
    """A minimal injected table should be usable on its own."""

    custom = Lexicon([NumeralLexeme("חמש", 5, UNIT), NumeralLexeme("מאות", 100, HUNDRED, is_plural_scale=True)])

    assert len(custom) == 2
    assert "חמש" in custom
    assert "שלושה" not in custom
    assert custom.is_numeral_word("מאות") is True
    assert custom.split_prefix("ומאות", ("ו",)) == ("ו", "מאות")
    assert custom.split_prefix("ושלושה", ("ו",)) is None
