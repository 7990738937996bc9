"""
Marginal trees: the bifurcating history of one block.

A MarginalTree is a plain value produced by the sweep. Nodes are wired
once during construction and expose read access only afterwards.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from marginaltrees.exceptions import InvariantViolation
from marginaltrees.tree import Node

logger = logging.getLogger(__name__)


class MarginalNode:
    """Node of a marginal tree, annotated with the clonal frame node it stems from."""

    __slots__ = ("nr", "height", "children", "parent", "cf_node_nr", "name")

    nr: int
    height: float
    children: Tuple[MarginalNode, ...]
    parent: Optional[MarginalNode]
    cf_node_nr: Optional[int]
    name: str

    def __init__(
        self,
        nr: int,
        height: float,
        children: Sequence[MarginalNode] = (),
        cf_node_nr: Optional[int] = None,
        name: str = "",
    ):
        self.nr = nr
        self.height = height
        self.children = tuple(children)
        self.parent = None
        self.cf_node_nr = cf_node_nr
        self.name = name
        for child in self.children:
            child.parent = self

    @classmethod
    def leaf(cls, cf_node: Node) -> MarginalNode:
        """A marginal leaf copying number, name and height of a clonal frame leaf."""
        return cls(cf_node.nr, cf_node.height, (), cf_node.nr, cf_node.name)

    def __repr__(self) -> str:
        return f"MarginalNode({self.nr}, height={self.height})"

    @property
    def left(self) -> Optional[MarginalNode]:
        return self.children[0] if self.children else None

    @property
    def right(self) -> Optional[MarginalNode]:
        return self.children[1] if len(self.children) > 1 else None

    @property
    def length(self) -> Optional[float]:
        if self.parent is None:
            return None
        return self.parent.height - self.height

    def is_leaf(self) -> bool:
        return not self.children

    def is_root(self) -> bool:
        return self.parent is None


def history_signature(
    node: Union[Node, MarginalNode], compare_nr: bool = False
) -> Tuple[Any, ...]:
    """
    Nested tuple describing topology, heights and leaf names below ``node``.

    Works for clonal frame nodes as well as marginal nodes, so a marginal
    tree can be compared directly with the clonal frame it was derived from.
    """
    key: Tuple[Any, ...] = (node.height, node.name if not node.children else "")
    if compare_nr:
        key += (node.nr,)
    return key + tuple(history_signature(child, compare_nr) for child in node.children)


@dataclass(frozen=True)
class SweepSummary:
    """How the conversions of a block acted during the sweep, by conversion id."""

    merging: Tuple[int, ...] = ()
    rekeying: Tuple[int, ...] = ()
    overshadowed: Tuple[int, ...] = ()

    @property
    def effective(self) -> Tuple[int, ...]:
        return tuple(sorted(self.merging + self.rekeying))


class MarginalTree:
    """
    Immutable marginal tree for one block.

    Args:
        root: Root of the fully wired marginal node structure
        block_id: Block the tree was reconstructed for

    Raises:
        InvariantViolation: If the structure is not a binary tree whose node
            numbers run from 0 to ``2 * leaf_count - 2``.
    """

    __slots__ = ("_root", "_nodes", "_leaf_count", "_block_id", "_summary")

    def __init__(
        self,
        root: MarginalNode,
        block_id: Optional[str] = None,
        summary: Optional[SweepSummary] = None,
    ):
        if root.parent is not None:
            raise InvariantViolation("Marginal root must not have a parent")
        self._root = root
        self._block_id = block_id
        self._summary = summary or SweepSummary()

        all_nodes = self._collect(root)
        self._leaf_count = sum(1 for node in all_nodes if node.is_leaf())
        expected = 2 * self._leaf_count - 1
        if len(all_nodes) != expected:
            message = (
                f"Marginal tree has {len(all_nodes)} nodes, expected {expected} "
                f"for {self._leaf_count} leaves"
            )
            logger.error(message)
            raise InvariantViolation(message)

        nodes: List[Optional[MarginalNode]] = [None] * len(all_nodes)
        for node in all_nodes:
            if not 0 <= node.nr < len(nodes) or nodes[node.nr] is not None:
                raise InvariantViolation(f"Invalid marginal node nr {node.nr}")
            nodes[node.nr] = node
        self._nodes: Tuple[MarginalNode, ...] = tuple(nodes)  # type: ignore[arg-type]

    @staticmethod
    def _collect(root: MarginalNode) -> List[MarginalNode]:
        nodes: List[MarginalNode] = []
        stack = [root]
        while stack:
            current = stack.pop()
            if current.children and len(current.children) != 2:
                raise InvariantViolation(
                    f"Marginal node {current.nr} has {len(current.children)} children"
                )
            nodes.append(current)
            stack.extend(reversed(current.children))
        return nodes

    # ------------------------------------------------------------------------
    # Read interface
    # ------------------------------------------------------------------------

    @property
    def root(self) -> MarginalNode:
        return self._root

    @property
    def block_id(self) -> Optional[str]:
        return self._block_id

    @property
    def summary(self) -> SweepSummary:
        return self._summary

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def internal_node_count(self) -> int:
        return self.node_count - self._leaf_count

    @property
    def nodes(self) -> Tuple[MarginalNode, ...]:
        """All nodes indexed by nr: leaves first, then internal nodes in creation order."""
        return self._nodes

    @property
    def leaves(self) -> Tuple[MarginalNode, ...]:
        return self._nodes[: self._leaf_count]

    def node(self, nr: int) -> MarginalNode:
        return self._nodes[nr]

    def traverse(self) -> List[MarginalNode]:
        """Pre-order list of all nodes."""
        return self._collect(self._root)

    def same_history(self, other: MarginalTree, compare_nr: bool = True) -> bool:
        return history_signature(self._root, compare_nr) == history_signature(
            other._root, compare_nr
        )

    # ------------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------------

    def to_newick(self, lengths: bool = True) -> str:
        return self._to_newick(self._root, lengths) + ";"

    def _to_newick(self, node: MarginalNode, lengths: bool) -> str:
        label = node.name or ""
        if node.children:
            label = (
                "("
                + ",".join(self._to_newick(child, lengths) for child in node.children)
                + ")"
                + label
            )
        if lengths and node.parent is not None:
            return f"{label}:{float(node.length):.6f}"
        return label

    def to_dict(self) -> Dict[str, Any]:
        def _node_dict(node: MarginalNode) -> Dict[str, Any]:
            return {
                "nr": node.nr,
                "name": node.name,
                "height": node.height,
                "cf_node_nr": node.cf_node_nr,
                "children": [_node_dict(child) for child in node.children],
            }

        return {"block": self._block_id, "root": _node_dict(self._root)}

    def __repr__(self) -> str:
        return f"MarginalTree(block={self._block_id!r}, {self.to_newick()})"

    def __str__(self) -> str:
        return self.to_newick()
