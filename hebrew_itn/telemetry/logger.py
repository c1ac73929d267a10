"""Structured normalization logging utilities.

Responsibilities:
- Emit concise, deterministic single-line diagnostics through `loguru`.
- Stay silent by default; output appears once a sink is attached or the
  `hebrew_itn` logger namespace is enabled by the host application.
"""

from __future__ import annotations

from typing import TextIO

from loguru import logger as _loguru_logger


_PACKAGE_NAMESPACE = "hebrew_itn"


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class NormalizationLogger:
    """Emit deterministic events for resolver diagnostics and worker pool activity."""

    def __init__(
        self, sink: TextIO | None = None, level: str = "DEBUG", *, exclusive: bool = False
    ) -> None:
        """Optionally attach a sink and enable the package log namespace.

        Args:
            sink: Stream receiving one line per event; `None` keeps the logger silent.
            level: Minimum level written to `sink`.
            exclusive: Drop every other loguru handler first. Only a process owner
                such as the CLI should set this; library callers keep their handlers.
        """

        self._handler_id: int | None = None
        if sink is not None:
            if exclusive:
                _loguru_logger.remove()
            self._handler_id = _loguru_logger.add(
                sink, format="{message}", level=level, colorize=False
            )
            _loguru_logger.enable(_PACKAGE_NAMESPACE)

    def close(self) -> None:
        """Detach the sink added by this logger and silence the namespace again."""

        if self._handler_id is None:
            return
        _loguru_logger.remove(self._handler_id)
        _loguru_logger.disable(_PACKAGE_NAMESPACE)
        self._handler_id = None

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[itn] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_rule_applied(self, rule: str, start_offset: int, end_offset: int) -> None:
        self._emit("DEBUG", "rule_applied", "special", rule=rule, start=start_offset, end=end_offset)

    def log_unresolved(self, raw_text: str, start_offset: int, end_offset: int) -> None:
        """Emit an unresolved-expression event; the text itself is left unchanged."""

        self._emit(
            "DEBUG",
            "unresolved",
            "resolve",
            text=raw_text,
            start=start_offset,
            end=end_offset,
        )

    def log_batch_dispatch(self, record_count: int, chunk_count: int, mode: str) -> None:
        self._emit("DEBUG", "dispatch", "batch", records=record_count, chunks=chunk_count, mode=mode)

    def log_worker_failure(self, error_type: str, chunk_size: int) -> None:
        """Emit a worker-failure event without record payload details."""

        self._emit("WARNING", "worker_failure", "pool", error_type=error_type, chunk_size=chunk_size)

    def log_pool_replaced(self, restarts: int) -> None:
        self._emit("WARNING", "pool_replaced", "pool", restarts=restarts)

    def log_sequential_fallback(self, chunk_count: int) -> None:
        self._emit("WARNING", "sequential_fallback", "pool", chunks=chunk_count)
