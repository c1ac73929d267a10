"""Module-level entry points backed by the shared default engine."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .config import NormalizerConfig
from .pipeline.batch import normalize_records as _normalize_records
from .pipeline.engine import default_normalizer
from .pipeline.worker_pool import WorkerPool


def normalize_text(text: str) -> str:
    """Replace every resolvable Hebrew numeral expression in `text` with digits.

    Raises:
        InvalidInputError: If `text` is `None` or not a string.
    """

    return default_normalizer().normalize_text(text)


def normalize_number(phrase: str) -> str:
    """Normalize a standalone numeral phrase; unresolvable phrases come back unchanged.

    Raises:
        InvalidInputError: If `phrase` is `None` or not a string.
    """

    return default_normalizer().normalize_number(phrase)


def normalize_records(
    records: Sequence[Mapping[str, Any]],
    *,
    text_field: str = "text",
    config: NormalizerConfig | None = None,
    pool: WorkerPool | None = None,
) -> list[dict[str, Any]]:
    """Normalize the text field of each record, preserving input order."""

    return _normalize_records(records, text_field=text_field, config=config, pool=pool)
