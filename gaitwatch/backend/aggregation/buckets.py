"""
aggregation/buckets.py

Calendar-aware bucketing of samples over a TimeRange.

Design:
  - Bucket i spans [start + i×width, start + (i+1)×width)
  - Offsets are always computed from the anchor (range start), never by
    stepping from the previous boundary, so a Jan 31 anchor yields
    Feb 28/29 → Mar 31 rather than drifting to the 28th
  - The last bucket may run past range.end; samples at or after end are
    excluded all the same
  - BucketAccumulator keeps only running sums and counts per bucket,
    never the raw samples

Thread safety: NOT thread-safe. One accumulator per query.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

from .models import Interval, Sample, TimeRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Bucket:
    index: int
    start: datetime
    end: datetime


def iter_buckets(time_range: TimeRange, interval: Interval) -> Iterator[Bucket]:
    """Yield the buckets covering ``time_range`` in chronological order."""
    index = 0
    start = time_range.start
    while start < time_range.end:
        end = time_range.start + interval.offset(index + 1)
        yield Bucket(index=index, start=start, end=end)
        index += 1
        start = end


def bucket_count(time_range: TimeRange, interval: Interval) -> int:
    """Number of buckets needed to cover ``time_range`` (calendar-aware ceil)."""
    return sum(1 for _ in iter_buckets(time_range, interval))


class BucketAccumulator:
    """
    Accumulates samples into the buckets of a single query.

    Args:
        time_range: Query range; its start is the bucket anchor.
        interval:   Bucket width.
    """

    def __init__(self, time_range: TimeRange, interval: Interval) -> None:
        self._range = time_range
        self._buckets = list(iter_buckets(time_range, interval))
        self._starts = [b.start for b in self._buckets]
        self._sums = [0.0] * len(self._buckets)
        self._counts = [0] * len(self._buckets)
        self.skipped = 0
        """Samples that fell outside the range."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def buckets(self) -> list[Bucket]:
        return list(self._buckets)

    def index_of(self, ts: datetime) -> int | None:
        """Index of the bucket containing ``ts``, or None when out of range."""
        if not self._range.contains(ts):
            return None
        return bisect.bisect_right(self._starts, ts) - 1

    def add(self, sample: Sample) -> bool:
        """Add one sample. Returns False if it lies outside the range."""
        index = self.index_of(sample.timestamp)
        if index is None:
            self.skipped += 1
            return False
        self._sums[index] += sample.value
        self._counts[index] += 1
        return True

    def extend(self, samples: Iterable[Sample]) -> None:
        for sample in samples:
            self.add(sample)

    def averages(self) -> list[float | None]:
        """Discrete average per bucket; None for a bucket with no samples."""
        result = [
            (total / count) if count else None
            for total, count in zip(self._sums, self._counts)
        ]
        logger.debug(
            "Bucketed %d sample(s) into %d bucket(s) — skipped=%d",
            sum(self._counts),
            len(self._buckets),
            self.skipped,
        )
        return result


def discrete_averages(
    samples: Iterable[Sample],
    time_range: TimeRange,
    interval: Interval,
) -> list[float | None]:
    """One-shot helper: bucket ``samples`` and return per-bucket averages."""
    acc = BucketAccumulator(time_range, interval)
    acc.extend(samples)
    return acc.averages()
