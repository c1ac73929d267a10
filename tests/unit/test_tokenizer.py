"""Unit tests for offset-preserving tokenization."""

from __future__ import annotations

from hebrew_itn.text.tokenizer import Tokenizer


def test_tokenizer_keeps_exact_offsets_and_strips_trailing_punctuation(
    tokenizer: Tokenizer,
) -> None:
    """Punctuation stays inside the token span but outside its core."""

    text = "ברציף שמונה."

    tokens = tokenizer.tokenize(text)

    assert [token.text for token in tokens] == ["ברציף", "שמונה."]
    second = tokens[1]
    assert (second.start_offset, second.end_offset) == (6, 12)
    assert second.core == "שמונה"
    assert second.core_end_offset == 11
    assert second.has_trailing_punctuation is True
    assert second.has_leading_punctuation is False


def test_tokenizer_marks_leading_punctuation(tokenizer: Tokenizer) -> None:
    tokens = tokenizer.tokenize("(חמש)")

    assert len(tokens) == 1
    assert tokens[0].core == "חמש"
    assert tokens[0].has_leading_punctuation is True
    assert tokens[0].has_trailing_punctuation is True


def test_tokenizer_handles_empty_and_repeated_whitespace(tokenizer: Tokenizer) -> None:
    """Whitespace runs are skipped without shifting offsets."""

    assert tokenizer.tokenize("") == []
    assert tokenizer.tokenize(" \t\n") == []

    tokens = tokenizer.tokenize("שלום  \tעולם")

    assert [token.start_offset for token in tokens] == [0, 7]
    assert tokens[1].core == "עולם"
