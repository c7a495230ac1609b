"""
tests/test_repository.py

Tests for storage/repository.py using in-memory SQLite (":memory:").
All tests are synchronous — repository is not async.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gaitwatch.backend.aggregation.models import QuantityKind, Sample
from gaitwatch.backend.metrics import METRICS
from gaitwatch.backend.storage.database import Database
from gaitwatch.backend.storage.repository import SampleRepository

WALK = QuantityKind.WALKING_SPEED


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    """In-memory SQLite database, initialised fresh for each test."""
    d = Database(":memory:")
    d.init_schema()
    yield d
    d.close()


@pytest.fixture
def repo(db):
    return SampleRepository(db)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_sample(ts: datetime | None = None, value: float = 1.25) -> Sample:
    return Sample(timestamp=ts or utc(2023, 3, 17, 9), value=value)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class TestSchema:

    def test_tables_created(self, db):
        rows = db.execute("SELECT name FROM sqlite_master WHERE type='table'")
        names = {r["name"] for r in rows}
        assert {"samples", "schema_version"} <= names

    def test_init_schema_idempotent(self, db):
        db.init_schema()
        rows = db.execute("SELECT version FROM schema_version")
        assert [r["version"] for r in rows] == [1]

    def test_writes_commit_themselves(self, db):
        """No separate commit step: executemany() leaves no open transaction."""
        db.executemany(
            "INSERT INTO samples (quantity, timestamp, value) VALUES (?, ?, ?)",
            [("walking_speed", 1.0, 1.2)],
        )
        assert db.conn.in_transaction is False
        assert not hasattr(db, "commit")


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

class TestSaveSamples:

    def test_save_single(self, repo):
        repo.save_sample(make_sample())
        assert repo.count_samples(WALK) == 1

    def test_save_batch_returns_inserted(self, repo):
        samples = [make_sample(utc(2023, 3, 17, h)) for h in range(5)]
        assert repo.save_samples(samples) == 5
        assert repo.count_samples() == 5

    def test_empty_batch(self, repo):
        assert repo.save_samples([]) == 0

    def test_ingest_counter(self, repo):
        METRICS.samples_ingested.reset()
        repo.save_samples([make_sample(), make_sample()])
        assert METRICS.samples_ingested.value == 2


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

class TestGetSamples:

    def test_round_trip_preserves_instant_and_value(self, repo):
        plus_one = timezone(timedelta(hours=1))
        original = make_sample(datetime(2023, 3, 17, 10, 15, 30, tzinfo=plus_one), 1.37)
        repo.save_sample(original)
        (loaded,) = repo.get_samples(WALK, utc(2023, 3, 17), utc(2023, 3, 18))
        assert loaded.timestamp == original.timestamp
        assert loaded.timestamp.tzinfo is not None
        assert loaded.value == pytest.approx(1.37)

    def test_range_is_half_open(self, repo):
        repo.save_samples([
            make_sample(utc(2023, 3, 10, 23, 59), 1.0),
            make_sample(utc(2023, 3, 11), 2.0),
            make_sample(utc(2023, 3, 17, 23, 59), 3.0),
            make_sample(utc(2023, 3, 18), 4.0),
        ])
        loaded = repo.get_samples(WALK, utc(2023, 3, 11), utc(2023, 3, 18))
        assert [s.value for s in loaded] == [2.0, 3.0]

    def test_sorted_oldest_first(self, repo):
        repo.save_samples([
            make_sample(utc(2023, 3, 15), 3.0),
            make_sample(utc(2023, 3, 12), 1.0),
            make_sample(utc(2023, 3, 13), 2.0),
        ])
        loaded = repo.get_samples(WALK, utc(2023, 3, 1), utc(2023, 4, 1))
        assert [s.value for s in loaded] == [1.0, 2.0, 3.0]

    def test_latest_sample(self, repo):
        assert repo.latest_sample() is None
        repo.save_samples([
            make_sample(utc(2023, 3, 12), 1.0),
            make_sample(utc(2023, 3, 15), 3.0),
        ])
        latest = repo.latest_sample()
        assert latest is not None
        assert latest.value == 3.0
