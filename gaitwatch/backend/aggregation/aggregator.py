"""
aggregation/aggregator.py

AggregationPipeline — turns one bucketed-average request against a
SampleSource into a renderer-ready AggregationResult.

Flow for aggregate(range, interval, labels):
  1. Count the calendar-aware buckets covering range
  2. Fail fast with LabelCountMismatch if labels disagree (no request made)
  3. Issue exactly one request_bucketed_average() to the source
     (bounded by `timeout` when set)
  4. Map empty buckets to EMPTY_BUCKET_VALUE and pair with the labels

Errors:
  - Any exception from the source → DataSourceError(cause)
  - Source bucket count != expected → LabelCountMismatch(from_source=True)
  - Cancellation of the awaiting task propagates unchanged

No caching, no retry. The pipeline never touches UI state; delivering the
result is the caller's job (see dashboard.py).

Stats dict:
    queries_issued    — requests sent to the source
    queries_failed    — requests that raised or timed out
    label_mismatches  — calls rejected for a label/bucket count mismatch
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime
from typing import TYPE_CHECKING, Sequence

from ..config import settings
from .buckets import bucket_count
from .errors import DataSourceError, LabelCountMismatch
from .models import AggregationResult, Interval, QuantityKind, TimeRange
from .presets import QueryPreset

if TYPE_CHECKING:
    from ..sources.base import SampleSource

logger = logging.getLogger(__name__)

EMPTY_BUCKET_VALUE = 0.0
"""Average reported for a bucket with no samples. A policy, not a fallback."""


class AggregationPipeline:
    """
    Args:
        source:   Where bucketed averages come from.
        quantity: Quantity to aggregate (walking speed by default).
        timeout:  Seconds to wait for the source; None waits forever.
    """

    def __init__(
        self,
        source: SampleSource,
        quantity: QuantityKind = QuantityKind.WALKING_SPEED,
        timeout: float | None = None,
    ) -> None:
        self._source = source
        self.quantity = quantity
        self._timeout = timeout

        self.stats: dict[str, int] = {
            "queries_issued": 0,
            "queries_failed": 0,
            "label_mismatches": 0,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def aggregate(
        self,
        time_range: TimeRange,
        interval: Interval,
        labels: Sequence[str],
    ) -> AggregationResult:
        """
        Average the tracked quantity over each bucket of ``time_range``.

        Returns:
            AggregationResult with one value per bucket (chronological) and
            ``labels`` unchanged.

        Raises:
            LabelCountMismatch: labels or source output disagree with the
                                bucket count.
            DataSourceError:    the source failed or timed out.
        """
        labels = tuple(labels)
        expected = bucket_count(time_range, interval)
        if len(labels) != expected:
            self.stats["label_mismatches"] += 1
            raise LabelCountMismatch(expected=expected, actual=len(labels))

        raw = await self._request(time_range, interval)

        if len(raw) != expected:
            self.stats["label_mismatches"] += 1
            logger.warning(
                "Source %r returned %d bucket(s) for %r %r — expected %d",
                self._source, len(raw), time_range, interval, expected,
            )
            raise LabelCountMismatch(expected=expected, actual=len(raw), from_source=True)

        values = tuple(_bucket_value(v) for v in raw)
        return AggregationResult(values=values, labels=labels)

    async def aggregate_preset(
        self,
        preset: QueryPreset,
        now: datetime | None = None,
    ) -> AggregationResult:
        """Resolve ``preset`` against ``now`` (default: current time in TIMEZONE)."""
        if now is None:
            now = datetime.now(settings.tzinfo)
        time_range = preset.resolve(now)
        logger.debug("Preset %r resolved to %r", preset.name, time_range)
        return await self.aggregate(time_range, preset.interval, preset.labels)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        time_range: TimeRange,
        interval: Interval,
    ) -> list[float | None]:
        """Single source call; every failure is wrapped as DataSourceError."""
        self.stats["queries_issued"] += 1
        try:
            request = self._source.request_bucketed_average(
                self.quantity, time_range, interval
            )
            if self._timeout is None:
                raw = await request
            else:
                raw = await asyncio.wait_for(request, timeout=self._timeout)
            return list(raw)
        except Exception as exc:
            self.stats["queries_failed"] += 1
            logger.warning(
                "Source %r failed for %r %r: %r",
                self._source, time_range, interval, exc,
            )
            raise DataSourceError(exc) from exc


def _bucket_value(raw: float | None) -> float:
    if raw is None:
        return EMPTY_BUCKET_VALUE
    value = float(raw)
    if math.isnan(value):
        return EMPTY_BUCKET_VALUE
    return value
