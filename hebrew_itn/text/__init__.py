"""Tokenization and text reconstruction stages."""

from .reconstructor import TextReconstructor
from .tokenizer import Tokenizer

__all__ = ["TextReconstructor", "Tokenizer"]
