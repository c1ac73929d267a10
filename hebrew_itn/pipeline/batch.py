"""Batch normalization over keyed records.

Responsibilities:
- Validate record batches before any work is dispatched.
- Run small batches in the caller and large batches on the worker pool.
- Return normalized records in input order without mutating the input.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from ..config import NormalizerConfig
from ..errors import InvalidInputError
from ..parsing import require_text
from ..telemetry.logger import NormalizationLogger
from .engine import HebrewNormalizer, default_normalizer
from .worker_pool import ChunkItem, WorkerPool, get_worker_pool


_MIN_BATCH_SIZE = 10
_CHUNKS_PER_WORKER = 3


def compute_batch_size(record_count: int, workers: int) -> int:
    """Return records per worker task for a batch of `record_count` records."""

    if workers <= 0:
        raise ValueError("`workers` must be a positive integer.")
    return max(_MIN_BATCH_SIZE, math.ceil(record_count / (workers * _CHUNKS_PER_WORKER)))


def _validate_records(records: object, text_field: str) -> Sequence[Mapping[str, Any]]:
    if not isinstance(records, list | tuple):
        received = "None" if records is None else type(records).__name__
        raise InvalidInputError(f"`records` must be a list of mappings, got {received}.")
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise InvalidInputError(
                f"`records[{position}]` must be a mapping, got {type(record).__name__}."
            )
        require_text(record.get(text_field), f"records[{position}].{text_field}")
    return records


def normalize_records(
    records: Sequence[Mapping[str, Any]],
    *,
    text_field: str = "text",
    config: NormalizerConfig | None = None,
    pool: WorkerPool | None = None,
    normalizer: HebrewNormalizer | None = None,
    logger: NormalizationLogger | None = None,
) -> list[dict[str, Any]]:
    """Normalize `text_field` of every record and return new records in input order.

    Args:
        records: List or tuple of mappings, each carrying `text_field`.
        text_field: Key of the text to normalize; other keys are copied as-is.
        config: Engine configuration; also controls batching thresholds.
        pool: Worker pool for large batches (default: the shared pool).
        normalizer: Engine for synchronous batches.
        logger: Diagnostics sink for dispatch events.

    Raises:
        InvalidInputError: If `records` is not a list of mappings with string text.
        WorkerFailure: If a chunk can be processed neither by workers nor sequentially.
    """

    validated = _validate_records(records, text_field)
    resolved_config = config or (normalizer.config if normalizer else NormalizerConfig())
    event_logger = logger or NormalizationLogger()

    if len(validated) <= resolved_config.sync_threshold:
        engine = normalizer or (
            HebrewNormalizer(resolved_config) if config is not None else default_normalizer()
        )
        event_logger.log_batch_dispatch(len(validated), 1 if validated else 0, "sync")
        normalized: list[dict[str, Any]] = []
        for record in validated:
            item = dict(record)
            item[text_field] = engine.normalize_text(record[text_field])
            normalized.append(item)
        return normalized

    worker_pool = pool or get_worker_pool(resolved_config.workers)
    chunk_size = resolved_config.batch_size or compute_batch_size(
        len(validated), worker_pool.size
    )
    tagged: list[ChunkItem] = list(enumerate(validated))
    chunks = [tagged[offset : offset + chunk_size] for offset in range(0, len(tagged), chunk_size)]
    event_logger.log_batch_dispatch(len(validated), len(chunks), "pool")

    results = worker_pool.run(chunks, text_field, resolved_config)
    return [record for _, record in results]
