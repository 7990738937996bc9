import ast
import math

from typing import Dict, List, Tuple, Any, Union

from marginaltrees.clonal_frame import ClonalFrame
from marginaltrees.exceptions import TreeStructureError
from marginaltrees.tree import Node

# Branch lengths are collected per node while parsing and turned into heights
# once the tree is complete.
Lengths = Dict[int, float]


# ===================================================================
# 1. METADATA PROCESSING FUNCTIONS
# ===================================================================


def split_token(token: str) -> Tuple[str, Any]:
    """
    Split a metadata token into name and value parts.
    Handles both "name=value" and "name:value" formats.

    Args:
        token: A string token in format "name=value" or "name:value"

    Returns:
        Tuple of (name, parsed_value) where parsed_value could be string, int, or float
    """
    if "=" in token:
        name, value = token.split("=", 1)
    elif ":" in token:
        name, value = token.split(":", 1)
    else:
        return token, True

    try:
        parsed_value = ast.literal_eval(value)
    except (ValueError, SyntaxError):
        parsed_value = value

    return name, parsed_value


def flush_meta_buffer(meta_buffer: List[str], stack: List[Node]) -> None:
    """
    Process the metadata buffer and update the current node's values.

    Accepts BEAST style ``[&key=value,...]`` comments as well as NHX
    ``[&&NHX:key=value:...]`` annotations.
    """
    meta_string = "".join(meta_buffer).strip()

    if meta_string.startswith("&&NHX:"):
        tokens = meta_string[6:].split(":")
    else:
        meta_string = meta_string.lstrip("&")
        tokens = meta_string.replace(";", ",").split(",")

    metadata: Dict[str, Any] = {}
    for token in tokens:
        if token.strip():
            name, value = split_token(token.strip())
            metadata[name] = value

    if metadata and stack:
        stack[-1].values.update(metadata)

    meta_buffer.clear()


# ===================================================================
# 2. BUFFER PROCESSING FUNCTIONS
# ===================================================================


def flush_character_buffer(buffer: List[str], stack: List[Node]) -> None:
    """Assign the buffered characters as the name of the current node."""
    if stack and buffer:
        stack[-1].name = "".join(buffer).strip()
    buffer.clear()


def flush_length_buffer(buffer: List[str], stack: List[Node], lengths: Lengths) -> None:
    """
    Parse the buffered characters as the branch length of the current node.

    Raises:
        TreeStructureError: If the length is not a finite non-negative number
    """
    if not stack:
        buffer.clear()
        return

    buffer_value = "".join(buffer).strip()
    buffer.clear()
    if not buffer_value:
        return

    try:
        parsed_number = float(buffer_value)
    except ValueError:
        raise TreeStructureError(f"Invalid branch length '{buffer_value}'")
    if math.isinf(parsed_number) or math.isnan(parsed_number) or parsed_number < 0:
        raise TreeStructureError(f"Invalid branch length '{buffer_value}'")
    lengths[id(stack[-1])] = parsed_number


def flush_buffer(buffer: List[str], stack: List[Node], mode: str, lengths: Lengths) -> None:
    if mode == "character_reader":
        flush_character_buffer(buffer, stack)
    elif mode == "length_reader":
        flush_length_buffer(buffer, stack, lengths)


# ===================================================================
# 3. NODE STACK MANAGEMENT FUNCTIONS
# ===================================================================


def create_new_node(stack: List[Node]) -> None:
    """Create a child of the current top node and push it onto the stack."""
    stack[-1].append_child(Node())
    stack.append(stack[-1].children[-1])


def close_node(stack: List[Node]) -> None:
    if len(stack) <= 1:
        raise TreeStructureError("Unbalanced parentheses in Newick string")
    stack.pop()


# ===================================================================
# 4. CORE PARSING FUNCTIONS
# ===================================================================


def _parse_newick(tokens: str) -> List[Tuple[Node, Lengths]]:
    """Return the top-level trees of the token string with their branch lengths."""
    trees: List[Tuple[Node, Lengths]] = []
    buffer: List[str] = []
    meta_buffer: List[str] = []
    mode = "character_reader"
    lengths: Lengths = {}
    node_stack: List[Node] = []

    for char in tokens:
        if char in "\n\r" and mode != "metadata_reader":
            continue

        if not node_stack and mode != "metadata_reader":
            if char.isspace():
                continue
            node_stack = [Node()]
            lengths = {}

        if mode == "metadata_reader":
            if char == "]":
                flush_meta_buffer(meta_buffer, node_stack)
                mode = "character_reader"
            else:
                meta_buffer.append(char)

        elif char == "(":
            create_new_node(node_stack)
            mode = "character_reader"

        elif char == ",":
            flush_buffer(buffer, node_stack, mode, lengths)
            close_node(node_stack)
            create_new_node(node_stack)
            mode = "character_reader"

        elif char == ")":
            flush_buffer(buffer, node_stack, mode, lengths)
            close_node(node_stack)
            mode = "character_reader"

        elif char == ":":
            flush_buffer(buffer, node_stack, mode, lengths)
            mode = "length_reader"

        elif char == "[":
            flush_buffer(buffer, node_stack, mode, lengths)
            mode = "metadata_reader"

        elif char == ";":
            flush_buffer(buffer, node_stack, mode, lengths)
            if len(node_stack) != 1:
                raise TreeStructureError("Unbalanced parentheses in Newick string")
            trees.append((node_stack.pop(), lengths))
            mode = "character_reader"

        else:
            buffer.append(char)

    if mode == "metadata_reader":
        raise TreeStructureError("Unterminated comment in Newick string")
    if node_stack:
        raise TreeStructureError("Newick string is missing its terminating ';'")
    return trees


def assign_heights(root: Node, lengths: Lengths, default_length: float) -> None:
    """
    Convert branch lengths into heights.

    The leaf furthest from the root is placed at height 0; every other node
    sits at ``max_depth - depth`` so sampling times of tips are preserved.
    """
    depths: Dict[int, float] = {id(root): 0.0}
    for node in root.traverse():
        for child in node.children:
            depths[id(child)] = depths[id(node)] + lengths.get(id(child), default_length)

    max_depth = max(depths[id(leaf)] for leaf in root.get_leaves())
    for node in root.traverse():
        node.height = max(0.0, max_depth - depths[id(node)])


# ===================================================================
# 5. PUBLIC API FUNCTIONS
# ===================================================================


def parse_newick(
    tokens: str, default_length: float = 1.0, force_list: bool = False
) -> Union[ClonalFrame, List[ClonalFrame]]:
    """
    Parse a Newick string into one or more clonal frames.

    Args:
        tokens: Newick format string, one or more trees each terminated by ';'
        default_length: Branch length for nodes without an explicit length
        force_list: Always return a list even for single trees

    Returns:
        Single ClonalFrame or list of ClonalFrames

    Raises:
        TreeStructureError: If the string is malformed or a tree is not a
            rooted binary tree with positive branch lengths.
    """
    parsed = _parse_newick(tokens)
    if not parsed:
        raise TreeStructureError("No tree found in Newick string")

    frames: List[ClonalFrame] = []
    for root, lengths in parsed:
        assign_heights(root, lengths, default_length)
        frames.append(ClonalFrame(root))

    if len(frames) == 1 and not force_list:
        return frames[0]
    return frames


def get_linear_order(clonal_frame: ClonalFrame) -> List[str]:
    """Leaf names of a clonal frame from left to right."""
    return [leaf.name for leaf in clonal_frame.root.get_leaves() if leaf.name]
