"""
Tests for the in-memory operation log.
"""

import logging

import pytest

from evolvedash.core.oplog import OperationLog


def test_newest_first():
    oplog = OperationLog()
    oplog.add("info", "first")
    oplog.add("warning", "second")
    assert [e.message for e in oplog.entries()] == ["second", "first"]


def test_capacity_evicts_oldest():
    oplog = OperationLog(capacity=3)
    for i in range(5):
        oplog.add("info", f"entry {i}")

    assert len(oplog) == 3
    assert [e.message for e in oplog.entries()] == ["entry 4", "entry 3", "entry 2"]


def test_filter_and_limit():
    oplog = OperationLog()
    oplog.add("info", "a")
    oplog.add("error", "b")
    oplog.add("info", "c")
    oplog.add("error", "d")

    assert [e.message for e in oplog.entries(level="error")] == ["d", "b"]
    assert [e.message for e in oplog.entries(limit=1)] == ["d"]
    assert [e.message for e in oplog.entries(limit=1, level="INFO")] == ["c"]


def test_metadata_kept():
    oplog = OperationLog()
    entry = oplog.add("info", "Feature request received", request_id="abc")
    assert entry.metadata == {"request_id": "abc"}
    assert entry.timestamp.tzinfo is not None


def test_mirrors_to_logger(caplog):
    oplog = OperationLog()
    with caplog.at_level(logging.INFO, logger="evolvedash.core.oplog"):
        oplog.add("error", "Feature request failed", request_id="abc")

    assert any(
        r.levelno == logging.ERROR and "Feature request failed" in r.getMessage()
        for r in caplog.records
    )


def test_rejects_unknown_level():
    with pytest.raises(ValueError):
        OperationLog().add("loud", "x")


def test_rejects_zero_capacity():
    with pytest.raises(ValueError):
        OperationLog(capacity=0)
