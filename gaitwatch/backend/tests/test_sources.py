"""
tests/test_sources.py

Tests for the in-memory and SQLite sample sources.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from gaitwatch.backend.aggregation.models import (
    Interval,
    IntervalUnit,
    QuantityKind,
    Sample,
    TimeRange,
)
from gaitwatch.backend.sources import InMemorySampleSource, SqliteSampleSource
from gaitwatch.backend.storage.database import Database
from gaitwatch.backend.storage.repository import SampleRepository

WALK = QuantityKind.WALKING_SPEED
DAY = Interval(IntervalUnit.DAY)
MONTH = Interval(IntervalUnit.MONTH)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


SAMPLES = [
    Sample(utc(2023, 3, 11, 8), 1.0),
    Sample(utc(2023, 3, 11, 19), 1.4),
    Sample(utc(2023, 3, 13, 7), 1.5),
    Sample(utc(2023, 3, 18, 0), 9.9),  # outside the range below
]
RANGE = TimeRange(start=utc(2023, 3, 11), end=utc(2023, 3, 14))


@pytest.fixture
def repo():
    db = Database(":memory:")
    db.init_schema()
    yield SampleRepository(db)
    db.close()


class TestInMemorySampleSource:

    @pytest.mark.asyncio
    async def test_bucketed_average(self):
        source = InMemorySampleSource(SAMPLES)
        averages = await source.request_bucketed_average(WALK, RANGE, DAY)
        assert averages == [pytest.approx(1.2), None, 1.5]

    @pytest.mark.asyncio
    async def test_empty_source(self):
        source = InMemorySampleSource()
        assert await source.request_bucketed_average(WALK, RANGE, DAY) == [None, None, None]

    def test_add_and_count(self):
        source = InMemorySampleSource()
        source.add(SAMPLES[0])
        assert source.count() == 1


class TestSqliteSampleSource:

    @pytest.mark.asyncio
    async def test_bucketed_average(self, repo):
        repo.save_samples(SAMPLES)
        source = SqliteSampleSource(repo)
        averages = await source.request_bucketed_average(WALK, RANGE, DAY)
        assert averages == [pytest.approx(1.2), None, pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_matches_in_memory_source(self, repo):
        repo.save_samples(SAMPLES)
        year = TimeRange(start=utc(2022, 3, 18), end=utc(2023, 3, 18))
        from_db = await SqliteSampleSource(repo).request_bucketed_average(WALK, year, MONTH)
        from_memory = await InMemorySampleSource(SAMPLES).request_bucketed_average(WALK, year, MONTH)
        for a, b in zip(from_db, from_memory):
            assert (a is None) == (b is None)
            if a is not None:
                assert a == pytest.approx(b)
        assert len(from_db) == 12

    @pytest.mark.asyncio
    async def test_database_error_propagates(self, repo):
        repo._db.conn.close()
        source = SqliteSampleSource(repo)
        with pytest.raises(sqlite3.ProgrammingError):
            await source.request_bucketed_average(WALK, RANGE, DAY)
