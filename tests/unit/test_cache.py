"""Unit tests for the normalization output cache."""

from __future__ import annotations

import pytest

from hebrew_itn.config import NormalizerConfig
from hebrew_itn.pipeline.cache import NormalizationCache
from hebrew_itn.pipeline.engine import HebrewNormalizer


def test_cache_key_is_deterministic_and_whitespace_sensitive() -> None:
    key_one = NormalizationCache.make_key(operation="Text", text="חמש  מאות")
    key_two = NormalizationCache.make_key(operation="text", text="חמש  מאות")
    key_three = NormalizationCache.make_key(operation="text", text="חמש מאות")

    assert key_one == key_two
    assert key_one.startswith("itn:text:")
    assert key_one != key_three
    assert key_one != NormalizationCache.make_key(operation="number", text="חמש  מאות")


def test_cache_tracks_hits_and_evicts_least_recently_used() -> None:
    cache = NormalizationCache(max_entries=2)
    cache.set("a", "1")
    cache.set("b", "2")

    assert cache.get("a") == "1"
    cache.set("c", "3")

    assert cache.get("b") is None
    assert cache.get("c") == "3"
    assert list(cache.entries) == ["a", "c"]
    assert cache.hits == 2
    assert cache.misses == 1
    assert cache.hit_rate() == pytest.approx(2 / 3)


def test_cache_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError, match="max_entries"):
        NormalizationCache(max_entries=0)
    assert NormalizationCache().hit_rate() == 0.0


def test_engine_reuses_cached_outputs() -> None:
    """Repeated inputs are served from the cache without changing results."""

    normalizer = HebrewNormalizer()

    first = normalizer.normalize_text("עשרים ושלושה")
    second = normalizer.normalize_text("עשרים ושלושה")

    assert first == second == "23"
    assert normalizer.cache is not None
    assert normalizer.cache.hits == 1
    assert normalizer.normalize_number("עשרים ושלושה") == "23"
    assert normalizer.cache.misses == 2


def test_engine_cache_can_be_disabled() -> None:
    normalizer = HebrewNormalizer(NormalizerConfig(cache_enabled=False))

    assert normalizer.cache is None
    assert normalizer.normalize_text("חמש מאות") == "500"
