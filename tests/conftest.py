"""Shared pytest fixtures for the full hebrew-itn test suite."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable

import pytest

from hebrew_itn.numerals.detector import ExpressionDetector
from hebrew_itn.numerals.lexicon import Lexicon
from hebrew_itn.pipeline.engine import HebrewNormalizer
from hebrew_itn.text.tokenizer import Tokenizer


@pytest.fixture(scope="session")
def lexicon() -> Lexicon:
    """Provide the built-in numeral lexicon."""

    return Lexicon.default()


@pytest.fixture
def tokenizer() -> Tokenizer:
    return Tokenizer()


@pytest.fixture
def detector(lexicon: Lexicon) -> ExpressionDetector:
    """Provide a detector with the default window."""

    return ExpressionDetector(lexicon)


@pytest.fixture
def normalizer() -> HebrewNormalizer:
    """Provide a fresh engine with default tables and configuration."""

    return HebrewNormalizer()


@pytest.fixture
def thread_executor_factory() -> Callable[[int], Executor]:
    """Provide an in-process executor factory for worker-pool tests."""

    def _factory(size: int) -> Executor:
        return ThreadPoolExecutor(max_workers=size)

    return _factory
