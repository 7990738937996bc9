import logging

import pytest

from marginaltrees.clonal_frame import ClonalFrame
from marginaltrees.elements.conversion import ConversionSet
from marginaltrees.parser.newick_parser import parse_newick
from marginaltrees.tree import Node


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


THREE_LEAF_NEWICK = "((A:1,B:1)D:1,C:2)R;"


@pytest.fixture
def three_leaf_frame() -> ClonalFrame:
    """A and B coalesce at 1.0 into D; D and C coalesce at 2.0 into R.

    Node numbers: A=0, B=1, C=2, D=3, R=4.
    """
    return parse_newick(THREE_LEAF_NEWICK)


@pytest.fixture
def four_leaf_frame() -> ClonalFrame:
    """((A,B)E:1.0,(C,D)F:1.5)G:3.0 built by hand.

    Node numbers: A=0, B=1, C=2, D=3, E=4, F=5, G=6.
    """
    a, b, c, d = (Node(name=name, height=0.0) for name in "ABCD")
    e = Node(children=[a, b], name="E", height=1.0)
    f = Node(children=[c, d], name="F", height=1.5)
    g = Node(children=[e, f], name="G", height=3.0)
    return ClonalFrame(g)


@pytest.fixture
def empty_conversions() -> ConversionSet:
    return ConversionSet()
