"""
tests/test_models.py

Tests for aggregation/models.py — construction-time validation.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from dateutil.relativedelta import relativedelta

from gaitwatch.backend.aggregation.models import (
    AggregationResult,
    Interval,
    IntervalUnit,
    QuantityKind,
    Sample,
    TimeRange,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestSample:

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValueError):
            Sample(timestamp=datetime(2023, 3, 17, 9, 0), value=1.2)

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            Sample(timestamp=utc(2023, 3, 17, 9), value=float("nan"))

    def test_is_immutable(self):
        s = Sample(timestamp=utc(2023, 3, 17, 9), value=1.2)
        with pytest.raises(AttributeError):
            s.value = 2.0  # type: ignore[misc]


class TestInterval:

    def test_count_must_be_positive(self):
        with pytest.raises(ValueError):
            Interval(IntervalUnit.DAY, count=0)

    @pytest.mark.parametrize("unit, expected", [
        (IntervalUnit.DAY, relativedelta(days=3)),
        (IntervalUnit.WEEK, relativedelta(weeks=3)),
        (IntervalUnit.MONTH, relativedelta(months=3)),
    ])
    def test_offset(self, unit, expected):
        assert Interval(unit).offset(3) == expected

    def test_offset_scales_with_count(self):
        assert Interval(IntervalUnit.DAY, count=2).offset(3) == relativedelta(days=6)


class TestTimeRange:

    def test_start_must_precede_end(self):
        with pytest.raises(ValueError):
            TimeRange(start=utc(2023, 3, 17), end=utc(2023, 3, 17))

    def test_naive_bounds_rejected(self):
        with pytest.raises(ValueError):
            TimeRange(start=datetime(2023, 3, 10), end=utc(2023, 3, 17))

    def test_contains_is_half_open(self):
        r = TimeRange(start=utc(2023, 3, 10), end=utc(2023, 3, 17))
        assert r.contains(utc(2023, 3, 10))
        assert r.contains(utc(2023, 3, 16, 23, 59))
        assert not r.contains(utc(2023, 3, 17))
        assert not r.contains(utc(2023, 3, 9, 23, 59))


class TestAggregationResult:

    def test_length_mismatch_rejected(self):
        with pytest.raises(ValueError):
            AggregationResult(values=(1.0, 2.0), labels=("a",))

    def test_len(self):
        assert len(AggregationResult(values=(1.0, 2.0), labels=("a", "b"))) == 2


def test_walking_speed_unit():
    assert QuantityKind.WALKING_SPEED.unit == "m/s"
