from __future__ import annotations
from typing import Optional, Any, Dict, List

try:
    from typing import Self
except ImportError:
    from typing_extensions import Self


class Node:
    """
    Clonal frame node with a fixed memory layout using __slots__.

    Nodes are numbered so that they can serve as indices into arena tables:
    leaves carry ``0..n-1`` and internal nodes ``n..2n-2``. The height is the
    time before present; an internal node is strictly older than its children.
    """

    __slots__ = (
        "nr",
        "height",
        "children",
        "parent",
        "name",
        "values",
        "_traverse_cache",
        "_leaves_cache",
    )

    # Type annotations (for static analysis, not runtime)
    nr: int
    height: float
    children: List[Self]
    parent: Optional[Self]
    name: str
    values: Dict[str, Any]
    _traverse_cache: Optional[List[Self]]
    _leaves_cache: Optional[List[Self]]

    def __init__(
        self,
        nr: int = -1,
        height: float = 0.0,
        children: Optional[List[Self]] = None,
        name: str = "",
        values: Optional[Dict[str, Any]] = None,
    ):
        # Avoid mutable default arguments; create fresh containers
        self.children = list(children) if children is not None else []
        for child in self.children:
            child.parent = self
        self.parent = None
        self.nr = nr
        self.height = float(height)
        self.name = name
        self.values = dict(values) if values is not None else {}
        self._traverse_cache = None
        self._leaves_cache = None

    def __repr__(self) -> str:
        return f"Node({self.nr}, '{self.name}', height={self.height})"

    # ------------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------------

    @property
    def left(self) -> Optional[Self]:
        return self.children[0] if self.children else None

    @property
    def right(self) -> Optional[Self]:
        return self.children[1] if len(self.children) > 1 else None

    @property
    def length(self) -> Optional[float]:
        """Branch length to the parent, ``None`` for the root."""
        if self.parent is None:
            return None
        return self.parent.height - self.height

    @property
    def leaves(self) -> List[Self]:
        return self.get_leaves()

    def append_child(self, node: Self) -> None:
        self.children.append(node)
        node.parent = self
        self.invalidate_caches()

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_internal(self) -> bool:
        return bool(self.children)

    def is_root(self) -> bool:
        return self.parent is None

    def get_root(self) -> Self:
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def invalidate_caches(self) -> None:
        """Drop cached traversals on this node and all of its ancestors."""
        cur: Optional[Self] = self
        while cur is not None:
            cur._traverse_cache = None
            cur._leaves_cache = None
            cur = cur.parent

    # ------------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------------

    def traverse(self) -> List[Self]:
        """
        Return a list of all nodes in the subtree rooted at this node (Pre-order).
        Uses an iterative stack approach to avoid recursion depth issues.
        """
        if self._traverse_cache is not None:
            return self._traverse_cache

        nodes: List[Self] = []
        stack: List[Self] = [self]

        while stack:
            current = stack.pop()
            nodes.append(current)
            # Add children in reverse to maintain left-to-right visit order (pre-order)
            for child in reversed(current.children):
                stack.append(child)

        self._traverse_cache = nodes
        return nodes

    def get_leaves(self) -> List[Self]:
        """Return all leaf nodes in the subtree rooted at this node, left to right."""
        if self._leaves_cache is not None:
            return self._leaves_cache

        leaves = [node for node in self.traverse() if node.is_leaf()]
        self._leaves_cache = leaves
        return leaves

    def get_current_order(self) -> tuple[str, ...]:
        return tuple(str(leaf.name) for leaf in self.get_leaves())

    # ------------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------------

    def to_newick(self, lengths: bool = True) -> str:
        return self._to_newick(lengths=lengths) + ";"

    def _to_newick(self, lengths: bool = True) -> str:
        label = self.name or ""
        if self.children:
            label = (
                "(" + ",".join(ch._to_newick(lengths) for ch in self.children) + ")"
            ) + label
        if lengths and self.parent is not None:
            return f"{label}:{float(self.length):.6f}"
        return label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nr": self.nr,
            "name": self.name,
            "height": self.height,
            "children": [child.to_dict() for child in self.children],
        }
