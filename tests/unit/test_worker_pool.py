"""Unit tests for worker-pool dispatch, recovery, and sequential fallback."""

from __future__ import annotations

from concurrent.futures import BrokenExecutor, Executor
import threading
from typing import Callable, Sequence

import pytest

from hebrew_itn.config import NormalizerConfig
from hebrew_itn.errors import InvalidInputError, WorkerFailure
from hebrew_itn.pipeline.worker_pool import (
    ChunkItem,
    ChunkResult,
    WorkerPool,
    get_worker_pool,
    normalize_chunk,
    shutdown_worker_pool,
)


def _chunks() -> list[list[ChunkItem]]:
    return [
        [(0, {"id": "a", "text": "חמש מאות"}), (1, {"id": "b", "text": "שלום"})],
        [(2, {"id": "c", "text": "עשרים ושלושה"})],
        [(3, {"id": "d", "text": "ברציף שמונה"})],
    ]


_EXPECTED = [
    (0, {"id": "a", "text": "500"}),
    (1, {"id": "b", "text": "שלום"}),
    (2, {"id": "c", "text": "23"}),
    (3, {"id": "d", "text": "ברציף 8"}),
]


class _FlakyTask:
    """Chunk task that raises `error` the first `failures` times it sees index 2."""

    def __init__(self, error: Exception, failures: int = 1) -> None:
        self.error = error
        self.failures = failures
        self.calls: list[int] = []
        self._lock = threading.Lock()

    def __call__(
        self, chunk: Sequence[ChunkItem], text_field: str, config: NormalizerConfig | None
    ) -> ChunkResult:
        first_index = chunk[0][0]
        with self._lock:
            self.calls.append(first_index)
            should_fail = first_index == 2 and self.failures > 0
            if should_fail:
                self.failures -= 1
        if should_fail:
            raise self.error
        return normalize_chunk(chunk, text_field, config)


def test_normalize_chunk_returns_new_records() -> None:
    record = {"id": 7, "text": "שבע עשרה"}

    result = normalize_chunk([(4, record)], "text")

    assert result == [(4, {"id": 7, "text": "17"})]
    assert record["text"] == "שבע עשרה"


def test_pool_returns_results_sorted_by_index(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    with WorkerPool(2, executor_factory=thread_executor_factory) as pool:
        assert pool.is_running is True
        results = pool.run(_chunks())

    assert results == _EXPECTED
    assert pool.is_closed is True


def test_pool_retries_failed_chunk_without_duplicates(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    """A chunk that raised is retried; completed chunks are not reprocessed."""

    task = _FlakyTask(RuntimeError("worker crashed"))
    with WorkerPool(2, executor_factory=thread_executor_factory, task=task) as pool:
        results = pool.run(_chunks())

    assert results == _EXPECTED
    assert sorted(task.calls) == [0, 2, 2, 3]


def test_pool_replaces_broken_executor(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    created: list[Executor] = []

    def _factory(size: int) -> Executor:
        executor = thread_executor_factory(size)
        created.append(executor)
        return executor

    task = _FlakyTask(BrokenExecutor("process died"))
    with WorkerPool(2, executor_factory=_factory, task=task) as pool:
        results = pool.run(_chunks())

    assert results == _EXPECTED
    assert len(created) == 2


def test_pool_falls_back_to_sequential_processing(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    """Once retries are exhausted the remaining chunks run in the caller."""

    task = _FlakyTask(RuntimeError("always failing"), failures=10)
    with WorkerPool(
        2, executor_factory=thread_executor_factory, task=task, max_restarts=1
    ) as pool:
        results = pool.run(_chunks())

    assert results == _EXPECTED
    assert task.calls.count(2) == 2


def test_pool_falls_back_when_executor_cannot_start() -> None:
    def _failing_factory(size: int) -> Executor:
        raise OSError("no processes available")

    pool = WorkerPool(2, executor_factory=_failing_factory)

    assert pool.run(_chunks()) == _EXPECTED
    assert pool.is_running is False


def test_pool_raises_worker_failure_when_fallback_fails(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    task = _FlakyTask(RuntimeError("always failing"), failures=10)
    fallback = _FlakyTask(RuntimeError("fallback failing"), failures=10)
    pool = WorkerPool(
        2,
        executor_factory=thread_executor_factory,
        task=task,
        fallback_task=fallback,
        max_restarts=0,
    )

    with pytest.raises(WorkerFailure) as exc_info:
        pool.run(_chunks())
    pool.shutdown()

    assert exc_info.value.failed_indices == (2,)


def test_pool_propagates_invalid_input(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    """Invalid records are API misuse, not worker failures."""

    with WorkerPool(1, executor_factory=thread_executor_factory) as pool:
        with pytest.raises(InvalidInputError):
            pool.run([[(0, {"text": None})]])


def test_pool_rejects_work_after_shutdown(
    thread_executor_factory: Callable[[int], Executor],
) -> None:
    pool = WorkerPool(1, executor_factory=thread_executor_factory)
    pool.shutdown()

    with pytest.raises(RuntimeError, match="shut down"):
        pool.run(_chunks())
    with pytest.raises(RuntimeError, match="shut down"):
        pool.start()


def test_pool_validates_settings() -> None:
    with pytest.raises(ValueError, match="size"):
        WorkerPool(0)
    with pytest.raises(ValueError, match="max_restarts"):
        WorkerPool(1, max_restarts=-1)


def test_shared_pool_is_created_lazily_and_recreated_after_shutdown() -> None:
    shutdown_worker_pool()
    first = get_worker_pool(1)
    try:
        assert get_worker_pool(1) is first
        assert first.is_running is False
    finally:
        shutdown_worker_pool()

    assert first.is_closed is True
    second = get_worker_pool(1)
    try:
        assert second is not first
    finally:
        shutdown_worker_pool()
