"""Logging helpers for normalization diagnostics."""

from .logger import NormalizationLogger

__all__ = ["NormalizationLogger"]
