"""
aggregation/models.py

Data models for the aggregation layer.

Sample            — one timestamped measurement (immutable)
QuantityKind      — which health quantity a sample measures, plus its unit
Interval          — calendar-aware bucket width (day / week / month × count)
TimeRange         — half-open [start, end) query range
AggregationResult — per-bucket averages + parallel labels, ready for a chart
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime

from dateutil.relativedelta import relativedelta


# ---------------------------------------------------------------------------
# QuantityKind
# ---------------------------------------------------------------------------

class QuantityKind(str, enum.Enum):
    """Tracked health quantity. Values are stored in the kind's unit."""

    WALKING_SPEED = "walking_speed"

    @property
    def unit(self) -> str:
        return _UNITS[self]


_UNITS: dict[QuantityKind, str] = {
    QuantityKind.WALKING_SPEED: "m/s",
}


# ---------------------------------------------------------------------------
# Sample
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Sample:
    """A single measurement of a quantity."""

    timestamp: datetime
    """Timezone-aware instant the sample was taken."""

    value: float
    """Measured value in the quantity's unit (m/s for walking speed)."""

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            raise ValueError("Sample.timestamp must be timezone-aware")
        if math.isnan(self.value):
            raise ValueError("Sample.value must be a number")


# ---------------------------------------------------------------------------
# Interval — semantic bucket width
# ---------------------------------------------------------------------------

class IntervalUnit(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class Interval:
    """
    Bucket width expressed in calendar units.

    Widths are applied with relativedelta so month buckets follow the
    calendar (28–31 days) instead of a fixed duration.
    """

    unit: IntervalUnit
    count: int = 1

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Interval.count must be >= 1 — got {self.count}")

    def offset(self, n: int) -> relativedelta:
        """Calendar offset spanning ``n`` buckets of this width."""
        steps = n * self.count
        if self.unit is IntervalUnit.DAY:
            return relativedelta(days=steps)
        if self.unit is IntervalUnit.WEEK:
            return relativedelta(weeks=steps)
        return relativedelta(months=steps)

    def __repr__(self) -> str:
        return f"Interval({self.count} {self.unit.value})"


# ---------------------------------------------------------------------------
# TimeRange — half-open query range
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TimeRange:
    """Half-open range [start, end). ``start`` is also the bucket anchor."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange bounds must be timezone-aware")
        if not self.start < self.end:
            raise ValueError(
                f"TimeRange start must be before end — got {self.start} → {self.end}"
            )

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end

    def __repr__(self) -> str:
        return f"TimeRange({self.start.isoformat()} → {self.end.isoformat()})"


# ---------------------------------------------------------------------------
# AggregationResult — renderer-ready output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AggregationResult:
    """
    Per-bucket averages in chronological order, with parallel labels.

    Created fresh for every aggregate() call and never shared or cached.
    """

    values: tuple[float, ...]
    labels: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.values) != len(self.labels):
            raise ValueError(
                f"values/labels length differ — {len(self.values)} vs {len(self.labels)}"
            )

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{l}={v:.2f}" for l, v in zip(self.labels, self.values))
        return f"AggregationResult({pairs})"
