"""Data elements describing conversions and blocks."""

from marginaltrees.elements.conversion import Conversion, ConversionSet
from marginaltrees.elements.block import Block, BlockSet

__all__ = ["Conversion", "ConversionSet", "Block", "BlockSet"]
