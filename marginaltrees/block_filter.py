"""Projection of a conversion set onto the conversions relevant to one block."""

from __future__ import annotations
import logging
from typing import List, Union

from marginaltrees.elements.block import Block
from marginaltrees.elements.conversion import Conversion, ConversionSet

logger = logging.getLogger(__name__)


def conversion_sort_key(conversion: Conversion) -> tuple[float, int]:
    """Ascending height; conversions at equal height are ordered by id."""
    return conversion.height, conversion.conversion_id


def get_block_conversions(
    conversions: ConversionSet, block: Union[Block, str]
) -> List[Conversion]:
    """
    Return the conversions affecting ``block`` sorted by ``(height, id)``.

    Args:
        conversions: The global conversion set
        block: A Block or a bare block id

    Returns:
        A new list; the conversion set itself is not modified.
    """
    block_id = block.block_id if isinstance(block, Block) else block
    selected = [conv for conv in conversions if conv.affects(block_id)]
    selected.sort(key=conversion_sort_key)
    logger.debug(
        f"Block '{block_id}': {len(selected)} of {len(conversions)} conversions"
    )
    return selected
