"""
aggregation/presets.py

The three fixed chart configurations (daily / weekly / monthly).

Each preset is data only: a name, a chart title, a bucket width and the
positional labels. resolve() turns it into a concrete TimeRange that ends
at the next local midnight, so today is always a complete bucket and
exactly len(labels) buckets cover the range.

Labels are positional and NOT checked against the calendar: the daily
chart is always labelled Sun..Sat whatever weekday today is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from dateutil.relativedelta import relativedelta

from .models import Interval, IntervalUnit, TimeRange


@dataclass(frozen=True, slots=True)
class QueryPreset:
    name: str
    title: str
    interval: Interval
    labels: tuple[str, ...]

    @property
    def bucket_count(self) -> int:
        return len(self.labels)

    def resolve(self, now: datetime) -> TimeRange:
        """
        Concrete range for this preset, ending at the midnight after ``now``.

        ``now`` must be timezone-aware; day boundaries follow its tzinfo.
        """
        if now.tzinfo is None:
            raise ValueError("now must be timezone-aware")
        end = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
        start = end - self.interval.offset(self.bucket_count)
        # Month arithmetic clips Feb 29 → Feb 28; move the anchor to the next
        # day so bucket_count buckets still reach end.
        if start + self.interval.offset(self.bucket_count) < end:
            start += relativedelta(days=1)
        return TimeRange(start=start, end=end)


# ---------------------------------------------------------------------------
# Preset table
# ---------------------------------------------------------------------------

DAILY = QueryPreset(
    name="daily",
    title="Daily",
    interval=Interval(IntervalUnit.DAY),
    labels=("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
)

WEEKLY = QueryPreset(
    name="weekly",
    title="Weekly",
    interval=Interval(IntervalUnit.WEEK),
    labels=("Week1", "Week2", "Week3", "Week4"),
)

MONTHLY = QueryPreset(
    name="monthly",
    title="Monthly",
    interval=Interval(IntervalUnit.MONTH),
    labels=tuple(str(i) for i in range(1, 13)),
)

PRESETS: dict[str, QueryPreset] = {p.name: p for p in (DAILY, WEEKLY, MONTHLY)}


def get_preset(name: str) -> QueryPreset:
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(
            f"unknown preset {name!r} — expected one of {sorted(PRESETS)}"
        ) from None
