"""
Active lineage table used during the marginal tree sweep.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from marginaltrees.exceptions import InvariantViolation
from marginaltrees.marginal_tree import MarginalNode

logger = logging.getLogger(__name__)


class LineageTracker:
    """
    Maps clonal frame node nrs to the marginal node currently carrying
    that lineage's history.

    Slots are indexed by node nr, so lookups never depend on object identity
    or hashing. A slot is filled exactly while its lineage is live.
    """

    __slots__ = ("_slots", "_active")

    def __init__(self, node_count: int):
        self._slots: List[Optional[MarginalNode]] = [None] * node_count
        self._active = 0

    def is_active(self, nr: int) -> bool:
        return self._slots[nr] is not None

    def lineage(self, nr: int) -> MarginalNode:
        node = self._slots[nr]
        if node is None:
            raise KeyError(f"Clonal frame lineage {nr} is not active")
        return node

    def activate(self, nr: int, node: MarginalNode) -> None:
        """
        Make ``node`` the live lineage of clonal frame node ``nr``.

        Raises:
            InvariantViolation: If ``nr`` already carries a live lineage.
        """
        if self._slots[nr] is not None:
            message = (
                f"Clonal frame lineage {nr} is already active "
                f"(marginal node {self._slots[nr].nr}); activating it again "
                f"would drop a lineage"
            )
            logger.error(message)
            raise InvariantViolation(message)
        self._slots[nr] = node
        self._active += 1

    def deactivate(self, nr: int) -> MarginalNode:
        node = self.lineage(nr)
        self._slots[nr] = None
        self._active -= 1
        return node

    def move(self, source: int, target: int) -> None:
        """Re-key the live lineage of ``source`` to ``target``."""
        self.activate(target, self.deactivate(source))

    def active_nrs(self) -> List[int]:
        return [nr for nr, node in enumerate(self._slots) if node is not None]

    def __len__(self) -> int:
        return self._active

    def __contains__(self, nr: object) -> bool:
        return isinstance(nr, int) and self._slots[nr] is not None

    def __repr__(self) -> str:
        return f"LineageTracker(active={self.active_nrs()})"
