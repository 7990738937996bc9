import pytest

from marginaltrees.exceptions import InvariantViolation
from marginaltrees.lineage_tracker import LineageTracker
from marginaltrees.marginal_tree import MarginalNode


def test_activate_and_lookup():
    tracker = LineageTracker(5)
    leaf = MarginalNode(0, 0.0, name="A")

    tracker.activate(0, leaf)

    assert tracker.is_active(0)
    assert 0 in tracker
    assert 1 not in tracker
    assert tracker.lineage(0) is leaf
    assert len(tracker) == 1


def test_move_rekeys_without_changing_count():
    tracker = LineageTracker(5)
    leaf = MarginalNode(0, 0.0)
    tracker.activate(0, leaf)

    tracker.move(0, 3)

    assert not tracker.is_active(0)
    assert tracker.lineage(3) is leaf
    assert tracker.active_nrs() == [3]
    assert len(tracker) == 1


def test_deactivate_returns_lineage():
    tracker = LineageTracker(3)
    tracker.activate(1, MarginalNode(1, 0.0))
    tracker.activate(2, MarginalNode(2, 0.0))

    node = tracker.deactivate(1)

    assert node.nr == 1
    assert len(tracker) == 1
    with pytest.raises(KeyError):
        tracker.deactivate(1)


def test_activating_live_slot_raises():
    tracker = LineageTracker(3)
    tracker.activate(0, MarginalNode(0, 0.0))

    with pytest.raises(InvariantViolation, match="already active"):
        tracker.activate(0, MarginalNode(1, 0.0))
