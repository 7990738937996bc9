"""
Epoch-keyed cache of marginal trees for callers that rebuild per state change.

The cache never inspects its inputs: the caller supplies an epoch counter
that changes whenever the clonal frame or the conversions may have changed.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from marginaltrees.builder import MarginalTreeBuilder
from marginaltrees.elements.block import Block
from marginaltrees.marginal_tree import MarginalTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedTree:
    epoch: int
    tree: MarginalTree


class MarginalTreeCache:
    """Keeps the most recent marginal tree of every block with the epoch it was built at."""

    def __init__(self, builder: MarginalTreeBuilder):
        self.builder = builder
        self._entries: Dict[str, CachedTree] = {}
        self.hits = 0
        self.misses = 0

    def get(self, block: Union[Block, str], epoch: int) -> MarginalTree:
        block_id = block.block_id if isinstance(block, Block) else block
        entry = self._entries.get(block_id)
        if entry is not None and entry.epoch == epoch:
            self.hits += 1
            return entry.tree

        self.misses += 1
        logger.debug(f"Rebuilding marginal tree of block '{block_id}' at epoch {epoch}")
        tree = self.builder.build(block_id)
        self._entries[block_id] = CachedTree(epoch, tree)
        return tree

    def peek(self, block_id: str) -> Optional[CachedTree]:
        return self._entries.get(block_id)

    def invalidate(self, block_id: Optional[str] = None) -> None:
        if block_id is None:
            self._entries.clear()
        else:
            self._entries.pop(block_id, None)

    def __len__(self) -> int:
        return len(self._entries)
