"""Blocks: data partitions whose marginal trees are reconstructed independently."""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional

if TYPE_CHECKING:
    from marginaltrees.elements.conversion import ConversionSet


@dataclass(frozen=True)
class Block:
    """
    Filter key selecting the conversions that affect one data partition.

    Attributes:
        block_id: Identifier matched against ``Conversion.blocks``
        name: Optional display name, defaults to the id
    """

    block_id: str
    name: str = ""

    def conversion_ids(self, conversions: ConversionSet) -> List[int]:
        """Ids of the conversions in ``conversions`` claimed by this block."""
        return conversions.ids_for_block(self.block_id)

    def __str__(self) -> str:
        return self.name or self.block_id


class BlockSet:
    """Ordered collection of blocks keyed by id."""

    def __init__(self, blocks: Optional[Iterable[Block]] = None):
        self._blocks: Dict[str, Block] = {}
        for block in blocks or ():
            self.add(block)

    @classmethod
    def from_ids(cls, block_ids: Iterable[str]) -> BlockSet:
        return cls(Block(block_id) for block_id in block_ids)

    def add(self, block: Block) -> None:
        if block.block_id in self._blocks:
            raise ValueError(f"Duplicate block id '{block.block_id}'")
        self._blocks[block.block_id] = block

    def get(self, block_id: str) -> Block:
        return self._blocks[block_id]

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks.values())

    def __len__(self) -> int:
        return len(self._blocks)
