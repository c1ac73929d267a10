"""Normalization engine, output cache, batch API, and worker pool."""

from .batch import compute_batch_size, normalize_records
from .cache import NormalizationCache
from .engine import HebrewNormalizer, default_normalizer
from .worker_pool import WorkerPool, get_worker_pool, normalize_chunk, shutdown_worker_pool

__all__ = [
    "HebrewNormalizer",
    "NormalizationCache",
    "WorkerPool",
    "compute_batch_size",
    "default_normalizer",
    "get_worker_pool",
    "normalize_chunk",
    "normalize_records",
    "shutdown_worker_pool",
]
