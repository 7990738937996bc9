from marginaltrees.block_filter import get_block_conversions
from marginaltrees.elements.block import Block, BlockSet
from marginaltrees.elements.conversion import Conversion, ConversionSet

import pytest


@pytest.fixture
def conversions() -> ConversionSet:
    return ConversionSet(
        [
            Conversion(0, 2, 0, 0.7, frozenset({"b0"})),
            Conversion(1, 1, 0, 0.3, frozenset({"b0", "b1"})),
            Conversion(2, 0, 1, 0.5, frozenset({"b1"})),
            Conversion(3, 2, 1, 0.3, frozenset({"b0"})),
        ]
    )


def test_filters_by_block_and_sorts_by_height_then_id(conversions):
    selected = get_block_conversions(conversions, Block("b0"))

    assert [conv.conversion_id for conv in selected] == [1, 3, 0]


def test_accepts_block_id(conversions):
    assert [c.conversion_id for c in get_block_conversions(conversions, "b1")] == [1, 2]
    assert get_block_conversions(conversions, "b2") == []


def test_does_not_reorder_conversion_set(conversions):
    get_block_conversions(conversions, "b0")

    assert [conv.conversion_id for conv in conversions] == [0, 1, 2, 3]


def test_block_conversion_ids(conversions):
    assert Block("b1").conversion_ids(conversions) == [1, 2]
    assert conversions.ids_for_block("b0") == [0, 1, 3]


def test_conversion_set_bookkeeping(conversions):
    assert conversions.count == 4
    assert conversions.next_id() == 4
    assert 2 in conversions

    removed = conversions.remove(2)
    assert removed.donor == 0
    assert 2 not in conversions
    assert len(conversions.without(0)) == 2
    assert len(conversions) == 3

    with pytest.raises(ValueError, match="Duplicate"):
        conversions.add(Conversion(1, 0, 1, 0.1))


def test_conversion_rejects_negative_id():
    with pytest.raises(ValueError):
        Conversion(-1, 0, 1, 0.5)


def test_block_set():
    blocks = BlockSet([Block("b0", name="gene A"), Block("b1")])

    assert [str(block) for block in blocks] == ["gene A", "b1"]
    assert "b1" in blocks
    assert blocks.get("b0").name == "gene A"
    with pytest.raises(ValueError):
        blocks.add(Block("b0"))
