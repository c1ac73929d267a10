"""Shared typed data models for hebrew-itn.

This package contains dataclasses used across normalization modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    NormalizationReport,
    NumberExpression,
    NumeralItem,
    NumeralLexeme,
    Replacement,
    ResolvedNumber,
    Token,
    UnresolvedExpression,
)

__all__ = [
    "NormalizationReport",
    "NumberExpression",
    "NumeralItem",
    "NumeralLexeme",
    "Replacement",
    "ResolvedNumber",
    "Token",
    "UnresolvedExpression",
]
