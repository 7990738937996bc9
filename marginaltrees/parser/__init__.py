"""
Newick format parser producing clonal frames.

Branch lengths are converted to node heights measured back from the
most recent sample.
"""

from .newick_parser import (
    parse_newick,
    split_token,
    flush_meta_buffer,
    flush_character_buffer,
    flush_length_buffer,
    flush_buffer,
    close_node,
    create_new_node,
    assign_heights,
    get_linear_order,
)

__all__ = [
    "parse_newick",
    "split_token",
    "flush_meta_buffer",
    "flush_character_buffer",
    "flush_length_buffer",
    "flush_buffer",
    "close_node",
    "create_new_node",
    "assign_heights",
    "get_linear_order",
]
