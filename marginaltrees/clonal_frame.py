"""
Clonal frame: the rooted binary tree onto which conversions are overlaid.

The clonal frame owns its nodes in an arena (a list indexed by node nr) and
derives the height-ordered event sequence consumed by the marginal tree sweep.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from marginaltrees.exceptions import TreeStructureError
from marginaltrees.tree import Node

logger = logging.getLogger(__name__)


class EventType(Enum):
    SAMPLE = "sample"
    COALESCENCE = "coalescence"


@dataclass(frozen=True)
class Event:
    """A clonal frame event: a sampled leaf or a coalescence of two lineages."""

    type: EventType
    height: float
    node: Node

    @property
    def nr(self) -> int:
        return self.node.nr


class ClonalFrame:
    """
    Immutable view of a rooted binary tree with node heights.

    If the nodes carry no numbers yet (``nr < 0``), leaves are numbered
    left to right starting at 0 and internal nodes by ascending height
    starting at the leaf count. Otherwise the existing numbering must already
    follow that scheme.

    Raises:
        TreeStructureError: If the tree is not binary, heights do not
            increase towards the root, or node numbers are inconsistent.
    """

    def __init__(self, root: Node):
        if root.parent is not None:
            raise TreeStructureError("Clonal frame root must not have a parent")
        self._root = root
        all_nodes = root.traverse()
        self._leaf_count = sum(1 for node in all_nodes if node.is_leaf())

        self._check_topology(all_nodes)
        if any(node.nr < 0 for node in all_nodes):
            self._assign_numbers(all_nodes)

        self._nodes: List[Optional[Node]] = [None] * len(all_nodes)
        for node in all_nodes:
            self._check_number(node, len(all_nodes))
            if self._nodes[node.nr] is not None:
                raise TreeStructureError(f"Duplicate clonal frame node nr {node.nr}")
            self._nodes[node.nr] = node

        self._events = self._build_events()
        logger.debug(
            f"Clonal frame with {self._leaf_count} leaves, root height {root.height}"
        )

    # ------------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------------

    def _check_topology(self, all_nodes: List[Node]) -> None:
        for node in all_nodes:
            if node.is_leaf():
                if node.height < 0:
                    raise TreeStructureError(
                        f"Leaf {node.name or node.nr} has negative height {node.height}"
                    )
                continue
            if len(node.children) != 2:
                raise TreeStructureError(
                    f"Clonal frame must be binary, node {node.name or node.nr} "
                    f"has {len(node.children)} children"
                )
            for child in node.children:
                if child.parent is not node:
                    raise TreeStructureError(
                        f"Broken parent pointer below node {node.name or node.nr}"
                    )
                if not child.height < node.height:
                    raise TreeStructureError(
                        f"Node {node.name or node.nr} at height {node.height} is not "
                        f"above its child {child.name or child.nr} at {child.height}"
                    )

    def _assign_numbers(self, all_nodes: List[Node]) -> None:
        for nr, leaf in enumerate(self._root.get_leaves()):
            leaf.nr = nr
        internal = [node for node in all_nodes if node.is_internal()]
        # Stable sort keeps pre-order among equal heights
        internal.sort(key=lambda node: node.height)
        for offset, node in enumerate(internal):
            node.nr = self._leaf_count + offset

    def _check_number(self, node: Node, node_count: int) -> None:
        if not 0 <= node.nr < node_count:
            raise TreeStructureError(
                f"Node nr {node.nr} out of range for {node_count} nodes"
            )
        if node.is_leaf() != (node.nr < self._leaf_count):
            raise TreeStructureError(
                f"Node nr {node.nr} breaks the leaves-first numbering "
                f"({self._leaf_count} leaves)"
            )

    def _build_events(self) -> Tuple[Event, ...]:
        events = [
            Event(
                EventType.SAMPLE if node.is_leaf() else EventType.COALESCENCE,
                node.height,
                node,
            )
            for node in self._nodes
            if node is not None
        ]
        events.sort(key=lambda event: (event.height, event.nr))
        return tuple(events)

    # ------------------------------------------------------------------------
    # Read interface
    # ------------------------------------------------------------------------

    @property
    def root(self) -> Node:
        return self._root

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def internal_node_count(self) -> int:
        return self.node_count - self._leaf_count

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)  # type: ignore[arg-type]

    @property
    def leaves(self) -> List[Node]:
        return self.nodes[: self._leaf_count]

    def node(self, nr: int) -> Node:
        if not 0 <= nr < len(self._nodes):
            raise KeyError(nr)
        return self._nodes[nr]  # type: ignore[return-value]

    def __contains__(self, nr: object) -> bool:
        return isinstance(nr, int) and 0 <= nr < len(self._nodes)

    def events(self) -> Tuple[Event, ...]:
        """Return the clonal frame events sorted by ``(height, nr)``."""
        return self._events

    def is_root(self, nr: int) -> bool:
        return nr == self._root.nr

    def parent_of(self, nr: int) -> Optional[Node]:
        return self.node(nr).parent

    def branch_bounds(self, nr: int) -> Tuple[float, float]:
        """
        Height interval of the branch above node ``nr``.

        The root branch extends to infinity.
        """
        node = self.node(nr)
        upper = node.parent.height if node.parent is not None else math.inf
        return node.height, upper

    def node_by_name(self) -> Dict[str, Node]:
        return {node.name: node for node in self.leaves if node.name}

    # ------------------------------------------------------------------------
    # Summary statistics consumed by conversion priors
    # ------------------------------------------------------------------------

    def _lineage_intervals(self) -> Tuple[np.ndarray, np.ndarray]:
        """Widths of the inter-event intervals and the lineage count in each."""
        heights = np.array([event.height for event in self._events], dtype=float)
        steps = np.array(
            [1 if event.type is EventType.SAMPLE else -1 for event in self._events]
        )
        lineages = np.cumsum(steps)[:-1]
        return np.diff(heights), lineages

    @property
    def length(self) -> float:
        """Total branch length of the clonal frame."""
        widths, lineages = self._lineage_intervals()
        return float(np.sum(widths * lineages))

    @property
    def paired_length(self) -> float:
        """Integral over time of the number of unordered pairs of co-existing lineages."""
        widths, lineages = self._lineage_intervals()
        return float(np.sum(widths * lineages * (lineages - 1) / 2.0))

    def to_newick(self, lengths: bool = True) -> str:
        return self._root.to_newick(lengths=lengths)

    def __repr__(self) -> str:
        return f"ClonalFrame({self.to_newick()})"
