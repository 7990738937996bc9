"""
Conversion edges and the id-keyed collection holding them.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Conversion:
    """
    Immutable lateral-transfer edge between two clonal frame branches.

    At ``height`` the recipient's lineage takes over (or merges with) the
    donor's history for every block listed in ``blocks``. Donor and recipient
    refer to the clonal frame node at the lower end of their branch.

    Attributes:
        conversion_id: Stable identifier, unique within a ConversionSet
        donor: Node nr of the donor branch
        recipient: Node nr of the recipient branch
        height: Time of the transfer
        blocks: Ids of the blocks this conversion affects

    Example:
        >>> conv = Conversion(0, donor=2, recipient=0, height=0.5, blocks=frozenset({"b0"}))
        >>> conv.affects("b0")
        True
    """

    conversion_id: int
    donor: int
    recipient: int
    height: float
    blocks: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.conversion_id < 0:
            raise ValueError(
                f"conversion_id must be non-negative, got {self.conversion_id}"
            )
        if not isinstance(self.blocks, frozenset):
            object.__setattr__(self, "blocks", frozenset(self.blocks))

    def affects(self, block_id: str) -> bool:
        return block_id in self.blocks

    def with_blocks(self, blocks: Iterable[str]) -> Conversion:
        return replace(self, blocks=frozenset(blocks))


class ConversionSet:
    """
    Collection of conversions keyed by id.

    Iteration is in ascending id order so that every consumer sees the same
    sequence regardless of insertion history.
    """

    def __init__(self, conversions: Optional[Iterable[Conversion]] = None):
        self._by_id: Dict[int, Conversion] = {}
        for conversion in conversions or ():
            self.add(conversion)

    def add(self, conversion: Conversion) -> None:
        if conversion.conversion_id in self._by_id:
            raise ValueError(
                f"Duplicate conversion id {conversion.conversion_id}"
            )
        self._by_id[conversion.conversion_id] = conversion

    def create(
        self, donor: int, recipient: int, height: float, blocks: Iterable[str] = ()
    ) -> Conversion:
        """Add a new conversion with the next free id and return it."""
        conversion = Conversion(
            self.next_id(), donor, recipient, height, frozenset(blocks)
        )
        self.add(conversion)
        return conversion

    def remove(self, conversion_id: int) -> Conversion:
        return self._by_id.pop(conversion_id)

    def get(self, conversion_id: int) -> Conversion:
        return self._by_id[conversion_id]

    def next_id(self) -> int:
        return max(self._by_id, default=-1) + 1

    def ids_for_block(self, block_id: str) -> List[int]:
        return [conv.conversion_id for conv in self if conv.affects(block_id)]

    def without(self, conversion_id: int) -> ConversionSet:
        """Return a copy of this set lacking one conversion."""
        return ConversionSet(
            conv for conv in self if conv.conversion_id != conversion_id
        )

    @property
    def count(self) -> int:
        return len(self._by_id)

    def __contains__(self, conversion_id: object) -> bool:
        return conversion_id in self._by_id

    def __iter__(self) -> Iterator[Conversion]:
        return iter(self._by_id[key] for key in sorted(self._by_id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __repr__(self) -> str:
        return f"ConversionSet({list(self)})"
