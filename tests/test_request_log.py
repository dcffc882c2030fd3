"""
Tests for the SQLite feature request log.
"""

import pytest

from evolvedash.core.db import init_db
from evolvedash.core.errors import NotFoundError
from evolvedash.core.requests import FeatureRequestLog, FeatureRequestStatus


@pytest.fixture
def log():
    conn = init_db(":memory:")
    yield FeatureRequestLog(conn)
    conn.close()


class TestCreate:
    def test_create_returns_pending_request(self, log):
        request_id = log.create("Add a clock panel")

        request = log.get(request_id)
        assert request is not None
        assert request.description == "Add a clock panel"
        assert request.status == FeatureRequestStatus.PENDING
        assert request.generated_components == []
        assert request.completed_at is None
        assert request.error is None

    def test_ids_are_unique(self, log):
        assert log.create("one") != log.create("two")

    def test_get_unknown_returns_none(self, log):
        assert log.get("missing") is None


class TestUpdate:
    def test_complete_with_files(self, log):
        request_id = log.create("Add a clock panel")

        log.update(request_id, FeatureRequestStatus.COMPLETED, ["ClockPanel.tsx", "clock.css"])

        request = log.get(request_id)
        assert request.status == FeatureRequestStatus.COMPLETED
        assert request.generated_components == ["ClockPanel.tsx", "clock.css"]
        assert request.completed_at is not None

    def test_fail_with_error(self, log):
        request_id = log.create("Add a clock panel")

        log.update(request_id, "failed", error="generator timed out")

        request = log.get(request_id)
        assert request.status == FeatureRequestStatus.FAILED
        assert request.error == "generator timed out"
        assert request.completed_at is not None

    def test_processing_is_not_terminal(self, log):
        request_id = log.create("Add a clock panel")
        log.update(request_id, FeatureRequestStatus.PROCESSING)
        assert log.get(request_id).completed_at is None

    def test_unknown_id_raises(self, log):
        with pytest.raises(NotFoundError) as exc_info:
            log.update("missing", FeatureRequestStatus.COMPLETED)
        assert "missing" in str(exc_info.value)

    def test_invalid_status_raises(self, log):
        request_id = log.create("x")
        with pytest.raises(ValueError):
            log.update(request_id, "exploded")


class TestList:
    def test_newest_first(self, log):
        ids = [log.create(f"request {i}") for i in range(3)]
        listed = [r.id for r in log.list()]
        assert listed == list(reversed(ids))

    def test_filter_by_status(self, log):
        done = log.create("done")
        log.create("waiting")
        log.update(done, FeatureRequestStatus.COMPLETED, [])

        completed = log.list(status=FeatureRequestStatus.COMPLETED)
        assert [r.id for r in completed] == [done]
        assert len(log.list(status="pending")) == 1

    def test_limit(self, log):
        for i in range(5):
            log.create(f"request {i}")
        assert len(log.list(limit=2)) == 2


class TestCounts:
    def test_count_and_stats(self, log):
        a = log.create("a")
        b = log.create("b")
        log.create("c")
        log.update(a, FeatureRequestStatus.COMPLETED, [])
        log.update(b, FeatureRequestStatus.FAILED, error="boom")

        assert log.count() == 3
        assert log.count("pending") == 1

        stats = log.stats()
        assert stats.total == 3
        assert stats.pending == 1
        assert stats.completed == 1
        assert stats.failed == 1
        assert stats.processing == 0

    def test_stats_empty(self, log):
        assert log.stats().total == 0


def test_serializes_with_camel_case(log):
    request_id = log.create("Add a clock panel")
    data = log.get(request_id).model_dump(mode="json", by_alias=True)
    assert set(data) == {
        "id",
        "description",
        "status",
        "timestamp",
        "generatedComponents",
        "completedAt",
        "error",
    }
