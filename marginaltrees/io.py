import json
from typing import IO, Any, Dict, Iterable, List, Optional, Union

from marginaltrees.clonal_frame import ClonalFrame
from marginaltrees.marginal_tree import MarginalTree
from marginaltrees.parser.newick_parser import parse_newick


def read_newick(
    path: str, default_length: float = 1.0, force_list: bool = False
) -> Union[ClonalFrame, List[ClonalFrame]]:
    with open(path) as f:
        newick_string: str = f.read()

    return parse_newick(newick_string, default_length=default_length, force_list=force_list)


def write_newick(trees: Iterable[Union[ClonalFrame, MarginalTree]], path: str) -> None:
    with open(path, mode="w") as f:
        for tree in trees:
            f.write(tree.to_newick() + "\n")


def serialize_marginal_trees(
    trees: Dict[str, MarginalTree], include_newick: bool = True
) -> List[Dict[str, Any]]:
    serialized: List[Dict[str, Any]] = []
    for block_id, tree in trees.items():
        d: Dict[str, Any] = tree.to_dict()
        d["block"] = block_id
        if include_newick:
            d["newick"] = tree.to_newick()
        serialized.append(d)
    return serialized


def dump_json(
    trees: Dict[str, MarginalTree], f: IO[str], indent: Optional[int] = 4
) -> None:
    json.dump(serialize_marginal_trees(trees), f, indent=indent)


def write_json(trees: Dict[str, MarginalTree], path: str) -> None:
    with open(path, mode="w") as f:
        dump_json(trees, f)
