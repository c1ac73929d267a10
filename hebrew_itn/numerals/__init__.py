"""Numeral lexicon, detection, resolution, special cases, and formatting."""

from .detector import ExpressionDetector
from .formatter import NumberFormatter
from .lexicon import Lexicon
from .resolver import HierarchicalResolver
from .special_cases import RuleContext, RuleMatch, SpecialCaseResolver

__all__ = [
    "ExpressionDetector",
    "HierarchicalResolver",
    "Lexicon",
    "NumberFormatter",
    "RuleContext",
    "RuleMatch",
    "SpecialCaseResolver",
]
