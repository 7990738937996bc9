"""
Property-based tests for marginal tree reconstruction.

Random clonal frames are grown by a coalescent-like process and decorated
with conversions that always attach to two branches alive at their height.
"""

from typing import List, Tuple

from hypothesis import assume, given, settings, strategies as st

from marginaltrees.builder import MarginalTreeBuilder
from marginaltrees.clonal_frame import ClonalFrame
from marginaltrees.elements.conversion import Conversion, ConversionSet
from marginaltrees.marginal_tree import history_signature
from marginaltrees.tree import Node


# ============================================================================
# Strategies
# ============================================================================


@st.composite
def clonal_frames(draw, min_leaves: int = 2, max_leaves: int = 8) -> ClonalFrame:
    """Coalesce random pairs of lineages at strictly increasing heights."""
    leaf_count = draw(st.integers(min_value=min_leaves, max_value=max_leaves))
    lineages: List[Node] = [
        Node(name=f"T{i}", height=0.0) for i in range(leaf_count)
    ]
    height = 0.0
    while len(lineages) > 1:
        height += draw(st.floats(min_value=0.1, max_value=2.0))
        i = draw(st.integers(min_value=0, max_value=len(lineages) - 1))
        first = lineages.pop(i)
        j = draw(st.integers(min_value=0, max_value=len(lineages) - 1))
        second = lineages.pop(j)
        lineages.append(Node(children=[first, second], height=height))
    return ClonalFrame(lineages[0])


def live_branches(frame: ClonalFrame, height: float) -> List[int]:
    """Node nrs whose branch strictly contains ``height``."""
    live = []
    for node in frame.nodes:
        lower, upper = frame.branch_bounds(node.nr)
        if lower < height < upper:
            live.append(node.nr)
    return live


@st.composite
def frames_with_conversions(
    draw, max_conversions: int = 12
) -> Tuple[ClonalFrame, ConversionSet]:
    frame = draw(clonal_frames())
    root_height = frame.root.height
    event_heights = {event.height for event in frame.events()}

    conversions = ConversionSet()
    for _ in range(draw(st.integers(min_value=0, max_value=max_conversions))):
        height = draw(
            st.floats(
                min_value=0.0,
                max_value=root_height,
                exclude_min=True,
                exclude_max=True,
            )
        )
        assume(height not in event_heights)
        live = live_branches(frame, height)
        assume(len(live) >= 2)
        donor = draw(st.sampled_from(live))
        recipient = draw(st.sampled_from([nr for nr in live if nr != donor]))
        blocks = draw(st.frozensets(st.sampled_from(["b0", "b1"]), min_size=1))
        conversions.create(donor, recipient, height, blocks)
    return frame, conversions


# ============================================================================
# Properties
# ============================================================================


class TestMarginalTreeProperties:
    @given(clonal_frames())
    @settings(max_examples=50)
    def test_identity_without_conversions(self, frame: ClonalFrame):
        tree = MarginalTreeBuilder(frame, ConversionSet()).build("b0")

        assert history_signature(tree.root, compare_nr=True) == history_signature(
            frame.root, compare_nr=True
        )

    @given(frames_with_conversions())
    @settings(max_examples=100)
    def test_node_count_invariant(self, data):
        frame, conversions = data
        builder = MarginalTreeBuilder(frame, conversions)

        for block_id in ("b0", "b1"):
            tree = builder.build(block_id)
            assert tree.node_count == 2 * frame.leaf_count - 1
            assert tree.leaf_count == frame.leaf_count
            assert sorted(leaf.name for leaf in tree.leaves) == sorted(
                leaf.name for leaf in frame.leaves
            )

    @given(frames_with_conversions())
    @settings(max_examples=50)
    def test_heights_never_decrease_towards_root(self, data):
        frame, conversions = data
        tree = MarginalTreeBuilder(frame, conversions).build("b0")

        for node in tree.traverse():
            for child in node.children:
                assert child.height <= node.height
        assert tree.root.height <= frame.root.height

    @given(frames_with_conversions())
    @settings(max_examples=50)
    def test_reconstruction_is_deterministic(self, data):
        frame, conversions = data
        builder = MarginalTreeBuilder(frame, conversions)

        first = builder.build("b0")
        second = builder.build("b0")

        assert first.same_history(second, compare_nr=True)
        assert first.summary == second.summary

    @given(frames_with_conversions())
    @settings(max_examples=100)
    def test_overshadowed_conversions_can_be_removed(self, data):
        frame, conversions = data
        reference = MarginalTreeBuilder(frame, conversions).build("b0")

        for conversion_id in reference.summary.overshadowed:
            reduced = conversions.without(conversion_id)
            tree = MarginalTreeBuilder(frame, reduced).build("b0")
            assert tree.same_history(reference, compare_nr=True)

    @given(frames_with_conversions())
    @settings(max_examples=50)
    def test_every_block_conversion_is_accounted_for(self, data):
        frame, conversions = data
        tree = MarginalTreeBuilder(frame, conversions).build("b1")
        summary = tree.summary

        handled = sorted(summary.effective + summary.overshadowed)
        assert handled == conversions.ids_for_block("b1")
        assert tree.internal_node_count == frame.leaf_count - 1
        assert len(summary.merging) <= frame.leaf_count - 1


def test_conversion_dataclass_normalises_blocks():
    conversion = Conversion(3, 0, 1, 0.5, blocks={"b0"})  # type: ignore[arg-type]

    assert isinstance(conversion.blocks, frozenset)
    assert conversion.affects("b0")
    assert not conversion.affects("b1")
