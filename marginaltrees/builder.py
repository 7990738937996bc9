"""
Marginal tree reconstruction.

The builder sweeps the clonal frame events from the present into the past
and folds in the conversions of one block between consecutive events. A
LineageTracker records which marginal node currently carries the history of
each live clonal frame lineage:

- a coalescence of two live lineages (clonal frame or conversion) creates a
  new marginal node,
- a coalescence with only one live side passes the lineage through,
- a conversion whose donor lineage is no longer live has no effect.

All sweep state is local to one ``build`` call; the clonal frame and the
conversion set are only read.
"""

from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Union

from marginaltrees.block_filter import get_block_conversions
from marginaltrees.clonal_frame import ClonalFrame, Event, EventType
from marginaltrees.config import BuilderConfig
from marginaltrees.elements.block import Block
from marginaltrees.elements.conversion import Conversion, ConversionSet
from marginaltrees.exceptions import InvariantViolation
from marginaltrees.lineage_tracker import LineageTracker
from marginaltrees.marginal_tree import MarginalNode, MarginalTree, SweepSummary
from marginaltrees.validation import validate_conversions


class MarginalTreeBuilder:
    """
    Reconstructs the marginal tree of a block from a clonal frame and conversions.

    Args:
        clonal_frame: The clonal frame shared by all blocks
        conversions: The global conversion set
        config: Optional builder configuration
    """

    def __init__(
        self,
        clonal_frame: ClonalFrame,
        conversions: ConversionSet,
        config: Optional[BuilderConfig] = None,
    ):
        self.clonal_frame = clonal_frame
        self.conversions = conversions
        self.config = config or BuilderConfig()
        self.logger = logging.getLogger(self.config.logger_name)

    def build(self, block: Union[Block, str]) -> MarginalTree:
        """
        Reconstruct the marginal tree of ``block``.

        Raises:
            StructuralInconsistency: If a block conversion does not fit the
                clonal frame (only when validation is enabled).
            InvariantViolation: If the sweep does not end with exactly one
                lineage at the clonal frame root.
        """
        block_id = block.block_id if isinstance(block, Block) else block
        block_conversions = get_block_conversions(self.conversions, block_id)
        if self.config.validate_conversions:
            validate_conversions(self.clonal_frame, block_conversions)
        return self.sweep(block_conversions, block_id)

    def sweep(
        self, block_conversions: Sequence[Conversion], block_id: Optional[str] = None
    ) -> MarginalTree:
        """
        Run the lineage sweep over pre-sorted conversions.

        ``block_conversions`` must be sorted by ``(height, id)``; a conversion at
        exactly the height of an event is applied before that event.
        """
        events = self.clonal_frame.events()
        tracker = LineageTracker(self.clonal_frame.node_count)
        next_nr = self.clonal_frame.leaf_count
        i_conv = 0
        merging: List[int] = []
        rekeying: List[int] = []
        overshadowed: List[int] = []

        for i_event, event in enumerate(events):
            if self._process_event(event, tracker, next_nr):
                next_nr += 1

            # The root event is last; everything above it is folded in here
            upper = (
                events[i_event + 1].height if i_event + 1 < len(events) else math.inf
            )
            while (
                i_conv < len(block_conversions)
                and block_conversions[i_conv].height <= upper
            ):
                conversion = block_conversions[i_conv]
                i_conv += 1
                donor, recipient = conversion.donor, conversion.recipient

                if not tracker.is_active(donor):
                    overshadowed.append(conversion.conversion_id)
                    self.logger.debug(
                        f"Conversion {conversion.conversion_id} overshadowed: "
                        f"donor lineage {donor} inactive at {conversion.height}"
                    )
                elif tracker.is_active(recipient):
                    recipient_lineage = tracker.deactivate(recipient)
                    donor_lineage = tracker.deactivate(donor)
                    tracker.activate(
                        recipient,
                        MarginalNode(
                            next_nr,
                            conversion.height,
                            (recipient_lineage, donor_lineage),
                            cf_node_nr=recipient,
                        ),
                    )
                    next_nr += 1
                    merging.append(conversion.conversion_id)
                else:
                    tracker.move(donor, recipient)
                    rekeying.append(conversion.conversion_id)

        self.logger.debug(
            f"Block '{block_id}': {len(merging)} merging, {len(rekeying)} re-keying and "
            f"{len(overshadowed)} overshadowed conversions"
        )
        summary = SweepSummary(tuple(merging), tuple(rekeying), tuple(overshadowed))
        return MarginalTree(
            self._root_lineage(tracker), block_id=block_id, summary=summary
        )

    @staticmethod
    def _process_event(event: Event, tracker: LineageTracker, next_nr: int) -> bool:
        """Apply one clonal frame event. Returns True if a marginal node was created."""
        node = event.node
        if event.type is EventType.SAMPLE:
            tracker.activate(node.nr, MarginalNode.leaf(node))
            return False

        left, right = node.left.nr, node.right.nr
        if tracker.is_active(left) and tracker.is_active(right):
            children = (tracker.deactivate(left), tracker.deactivate(right))
            tracker.activate(
                node.nr,
                MarginalNode(next_nr, event.height, children, cf_node_nr=node.nr),
            )
            return True
        if tracker.is_active(left):
            tracker.move(left, node.nr)
        elif tracker.is_active(right):
            tracker.move(right, node.nr)
        return False

    def _root_lineage(self, tracker: LineageTracker) -> MarginalNode:
        root_nr = self.clonal_frame.root.nr
        if len(tracker) != 1 or not tracker.is_active(root_nr):
            message = (
                f"Sweep ended with {len(tracker)} active lineages "
                f"{tracker.active_nrs()}, expected exactly the root lineage {root_nr}"
            )
            self.logger.error(message)
            raise InvariantViolation(message)
        return tracker.lineage(root_nr)


def build_marginal_tree(
    clonal_frame: ClonalFrame,
    conversions: ConversionSet,
    block: Union[Block, str],
    config: Optional[BuilderConfig] = None,
) -> MarginalTree:
    """Reconstruct the marginal tree of a single block."""
    return MarginalTreeBuilder(clonal_frame, conversions, config).build(block)


def build_marginal_trees(
    clonal_frame: ClonalFrame,
    conversions: ConversionSet,
    blocks: Iterable[Union[Block, str]],
    config: Optional[BuilderConfig] = None,
) -> Dict[str, MarginalTree]:
    """Reconstruct one marginal tree per block, keyed by block id."""
    builder = MarginalTreeBuilder(clonal_frame, conversions, config)
    trees: Dict[str, MarginalTree] = {}
    for block in blocks:
        block_id = block.block_id if isinstance(block, Block) else block
        trees[block_id] = builder.build(block_id)
    return trees


__all__: List[str] = [
    "MarginalTreeBuilder",
    "build_marginal_tree",
    "build_marginal_trees",
]
