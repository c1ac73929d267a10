"""Top-level package for hebrew-itn.

This package converts spelled-out Hebrew numerals in free text into digits
(inverse text normalization). The main entry points are `normalize_text`,
`normalize_number`, and `normalize_records`; `HebrewNormalizer` exposes the
engine with injectable tables and a diagnostics report.
"""

from loguru import logger as _logger

from .api import normalize_number, normalize_records, normalize_text
from .config import ConfigLoader, NormalizerConfig
from .errors import InvalidInputError, NormalizerStageError, WorkerFailure
from .models.datatypes import NormalizationReport
from .pipeline.engine import HebrewNormalizer

__all__ = [
    "ConfigLoader",
    "HebrewNormalizer",
    "InvalidInputError",
    "NormalizationReport",
    "NormalizerConfig",
    "NormalizerStageError",
    "WorkerFailure",
    "__version__",
    "normalize_number",
    "normalize_records",
    "normalize_text",
]

__version__ = "0.1.0"

_logger.disable("hebrew_itn")
