# mypy: ignore-errors
"""Marginal tree reconstruction from clonal frames and conversions."""

__all__ = [
    "ClonalFrame",
    "Event",
    "EventType",
    "Conversion",
    "ConversionSet",
    "Block",
    "BlockSet",
    "get_block_conversions",
    "LineageTracker",
    "MarginalNode",
    "MarginalTree",
    "MarginalTreeBuilder",
    "build_marginal_tree",
    "build_marginal_trees",
    "MarginalTreeCache",
    "BuilderConfig",
    "parse_newick",
]

_LOCATIONS = {
    "ClonalFrame": "marginaltrees.clonal_frame",
    "Event": "marginaltrees.clonal_frame",
    "EventType": "marginaltrees.clonal_frame",
    "Conversion": "marginaltrees.elements.conversion",
    "ConversionSet": "marginaltrees.elements.conversion",
    "Block": "marginaltrees.elements.block",
    "BlockSet": "marginaltrees.elements.block",
    "get_block_conversions": "marginaltrees.block_filter",
    "LineageTracker": "marginaltrees.lineage_tracker",
    "MarginalNode": "marginaltrees.marginal_tree",
    "MarginalTree": "marginaltrees.marginal_tree",
    "MarginalTreeBuilder": "marginaltrees.builder",
    "build_marginal_tree": "marginaltrees.builder",
    "build_marginal_trees": "marginaltrees.builder",
    "MarginalTreeCache": "marginaltrees.cache",
    "BuilderConfig": "marginaltrees.config",
    "parse_newick": "marginaltrees.parser.newick_parser",
}


def __getattr__(name):
    if name in _LOCATIONS:
        from importlib import import_module

        return getattr(import_module(_LOCATIONS[name]), name)
    raise AttributeError(name)
