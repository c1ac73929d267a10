"""Fixed-size worker pool for batch normalization.

Responsibilities:
- Dispatch index-tagged record chunks to parallel execution contexts, each
  running its own normalization engine.
- Replace a broken executor and retry the affected chunks without losing or
  duplicating records.
- Fall back to sequential in-process processing when workers are unavailable.
- Shut down cooperatively.

Key types:
- `WorkerPool`: request/response channel around `normalize_chunk`.
"""

from __future__ import annotations

from concurrent.futures import (
    BrokenExecutor,
    Executor,
    Future,
    ProcessPoolExecutor,
    as_completed,
)
import os
import threading
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..config import NormalizerConfig
from ..errors import InvalidInputError, WorkerFailure
from ..telemetry.logger import NormalizationLogger
from .engine import HebrewNormalizer


ChunkItem = tuple[int, Mapping[str, Any]]
ChunkResult = list[tuple[int, dict[str, Any]]]
ChunkTask = Callable[[Sequence[ChunkItem], str, "NormalizerConfig | None"], ChunkResult]
ExecutorFactory = Callable[[int], Executor]

_worker_state: dict[str, Any] = {}


def _worker_normalizer(config: NormalizerConfig | None) -> HebrewNormalizer:
    """Return the engine owned by the current worker process."""

    resolved = config or NormalizerConfig()
    if _worker_state.get("config") != resolved or "normalizer" not in _worker_state:
        _worker_state["normalizer"] = HebrewNormalizer(resolved)
        _worker_state["config"] = resolved
    return _worker_state["normalizer"]


def normalize_chunk(
    chunk: Sequence[ChunkItem], text_field: str, config: NormalizerConfig | None = None
) -> ChunkResult:
    """Normalize the text field of each index-tagged record in `chunk`.

    Returns:
        `(index, record)` pairs; each record is a new dict.

    Raises:
        InvalidInputError: If a record's text field is missing or not a string.
    """

    normalizer = _worker_normalizer(config)
    results: ChunkResult = []
    for index, record in chunk:
        normalized = dict(record)
        normalized[text_field] = normalizer.normalize_text(record.get(text_field))
        results.append((index, normalized))
    return results


def _process_executor(size: int) -> Executor:
    return ProcessPoolExecutor(max_workers=size)


class WorkerPool:
    """Run chunk tasks on a replaceable executor with sequential fallback."""

    def __init__(
        self,
        size: int | None = None,
        *,
        executor_factory: ExecutorFactory | None = None,
        task: ChunkTask = normalize_chunk,
        fallback_task: ChunkTask = normalize_chunk,
        max_restarts: int = 2,
        logger: NormalizationLogger | None = None,
    ) -> None:
        """Initialize pool settings; the executor starts lazily.

        Args:
            size: Number of parallel execution contexts (default: CPU count).
            executor_factory: Builds an executor for a given size.
            task: Chunk function submitted to the executor.
            fallback_task: Chunk function run in-process when workers fail.
            max_restarts: Retry rounds before falling back to sequential mode.
            logger: Diagnostics sink.
        """

        resolved_size = size if size is not None else (os.cpu_count() or 1)
        if resolved_size <= 0:
            raise ValueError("Worker pool size must be a positive integer.")
        if max_restarts < 0:
            raise ValueError("`max_restarts` must not be negative.")
        self.size = resolved_size
        self._executor_factory = executor_factory or _process_executor
        self._task = task
        self._fallback_task = fallback_task
        self._max_restarts = max_restarts
        self._logger = logger or NormalizationLogger()
        self._executor: Executor | None = None
        self._closed = False
        self._lock = threading.RLock()

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Create the executor if it is not running yet."""

        with self._lock:
            if self._closed:
                raise RuntimeError("Worker pool has been shut down.")
            if self._executor is None:
                self._executor = self._executor_factory(self.size)

    def run(
        self,
        chunks: Iterable[Sequence[ChunkItem]],
        text_field: str = "text",
        config: NormalizerConfig | None = None,
    ) -> ChunkResult:
        """Process all chunks and return `(index, record)` pairs sorted by index.

        Raises:
            InvalidInputError: If a record carries a non-string text field.
            WorkerFailure: If a chunk fails both on workers and sequentially.
            RuntimeError: If the pool was shut down.
        """

        if self._closed:
            raise RuntimeError("Worker pool has been shut down.")

        completed: dict[int, dict[str, Any]] = {}
        pending = [list(chunk) for chunk in chunks if chunk]
        restarts = 0

        while pending:
            try:
                self.start()
            except RuntimeError:
                raise
            except Exception as exc:
                self._logger.log_worker_failure(type(exc).__name__, 0)
                break

            failed, broken = self._dispatch(pending, text_field, config, completed)
            pending = failed
            if not pending or restarts >= self._max_restarts:
                break
            restarts += 1
            if broken:
                try:
                    self._replace_executor()
                except Exception as exc:
                    self._logger.log_worker_failure(type(exc).__name__, 0)
                    break
                self._logger.log_pool_replaced(restarts)

        if pending:
            self._logger.log_sequential_fallback(len(pending))
            for chunk in pending:
                self._run_sequentially(chunk, text_field, config, completed)

        return sorted(completed.items(), key=lambda item: item[0])

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release the executor after in-flight work ends."""

        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> WorkerPool:
        self.start()
        return self

    def __exit__(self, *_: object) -> None:
        self.shutdown(wait=True)

    def _dispatch(
        self,
        pending: list[list[ChunkItem]],
        text_field: str,
        config: NormalizerConfig | None,
        completed: dict[int, dict[str, Any]],
    ) -> tuple[list[list[ChunkItem]], bool]:
        """Submit chunks once and return `(failed_chunks, executor_broken)`."""

        with self._lock:
            executor = self._executor
        if executor is None:
            return pending, True

        futures: dict[Future[ChunkResult], list[ChunkItem]] = {}
        failed: list[list[ChunkItem]] = []
        broken = False
        for chunk in pending:
            try:
                futures[executor.submit(self._task, chunk, text_field, config)] = chunk
            except (BrokenExecutor, RuntimeError) as exc:
                self._logger.log_worker_failure(type(exc).__name__, len(chunk))
                failed.append(chunk)
                broken = True

        for future in as_completed(futures):
            chunk = futures[future]
            try:
                results = future.result()
            except InvalidInputError:
                raise
            except BrokenExecutor as exc:
                self._logger.log_worker_failure(type(exc).__name__, len(chunk))
                failed.append(chunk)
                broken = True
            except Exception as exc:
                self._logger.log_worker_failure(type(exc).__name__, len(chunk))
                failed.append(chunk)
            else:
                self._collect(results, completed)
        return failed, broken

    def _replace_executor(self) -> None:
        """Discard the current executor and start a fresh one."""

        with self._lock:
            executor, self._executor = self._executor, None
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)
            self._executor = self._executor_factory(self.size)

    def _run_sequentially(
        self,
        chunk: list[ChunkItem],
        text_field: str,
        config: NormalizerConfig | None,
        completed: dict[int, dict[str, Any]],
    ) -> None:
        try:
            results = self._fallback_task(chunk, text_field, config)
        except InvalidInputError:
            raise
        except Exception as exc:
            raise WorkerFailure(
                f"Sequential fallback failed: {exc}",
                failed_indices=tuple(index for index, _ in chunk),
            ) from exc
        self._collect(results, completed)

    @staticmethod
    def _collect(results: ChunkResult, completed: dict[int, dict[str, Any]]) -> None:
        for index, record in results:
            completed.setdefault(index, record)


_shared_pool: WorkerPool | None = None
_shared_lock = threading.Lock()


def get_worker_pool(size: int | None = None) -> WorkerPool:
    """Return the lazily created shared pool, creating it with `size` workers."""

    global _shared_pool
    with _shared_lock:
        if _shared_pool is None or _shared_pool.is_closed:
            _shared_pool = WorkerPool(size)
        return _shared_pool


def shutdown_worker_pool(wait: bool = True) -> None:
    """Shut down the shared pool if one was created."""

    global _shared_pool
    with _shared_lock:
        pool, _shared_pool = _shared_pool, None
    if pool is not None:
        pool.shutdown(wait=wait)
