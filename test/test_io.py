import json
import logging

from marginaltrees.builder import build_marginal_trees
from marginaltrees.config import LoggingConfig
from marginaltrees.elements.conversion import ConversionSet
from marginaltrees.io import read_newick, write_json, write_newick
from marginaltrees.logging_config import configure_logging


def test_newick_file_round_trip(tmp_path, three_leaf_frame):
    path = tmp_path / "frames.nwk"
    write_newick([three_leaf_frame, three_leaf_frame], str(path))

    frames = read_newick(str(path))

    assert len(frames) == 2
    assert frames[0].to_newick() == three_leaf_frame.to_newick()


def test_write_json(tmp_path, three_leaf_frame):
    conversions = ConversionSet()
    conversions.create(donor=2, recipient=0, height=0.5, blocks={"b1"})
    trees = build_marginal_trees(three_leaf_frame, conversions, ["b0", "b1"])
    path = tmp_path / "trees.json"

    write_json(trees, str(path))

    data = json.loads(path.read_text())
    assert [entry["block"] for entry in data] == ["b0", "b1"]
    assert data[1]["root"]["height"] == 1.0
    assert data[1]["root"]["children"][0]["cf_node_nr"] == 0
    assert data[0]["newick"] == "((A:1.000000,B:1.000000):1.000000,C:2.000000);"


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "marginaltrees.log"
    logger = configure_logging(LoggingConfig(level="debug", log_file=log_file))

    logging.getLogger("marginaltrees.builder").debug("sweep finished")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "sweep finished" in log_file.read_text()

    # Reconfiguring replaces handlers instead of stacking them
    configure_logging(LoggingConfig(level="INFO", log_file=None))
    assert len(logger.handlers) == 1
