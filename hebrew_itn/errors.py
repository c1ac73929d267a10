"""Domain exceptions for normalization, batch processing, and CLI diagnostics."""

from __future__ import annotations


class InvalidInputError(TypeError):
    """Raised when an API entry point receives a non-string or missing input."""


class NormalizerStageError(RuntimeError):
    """Raised when a named stage such as config loading fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class WorkerFailure(RuntimeError):
    """Raised when a batch can be processed neither by workers nor sequentially."""

    def __init__(self, detail: str, *, failed_indices: tuple[int, ...] = ()) -> None:
        super().__init__(detail)
        self.failed_indices = failed_indices
