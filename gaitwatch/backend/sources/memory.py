"""
sources/memory.py

In-memory SampleSource. Used by tests and by the --once demo when no
database is configured.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Iterable, Sequence

from ..aggregation.buckets import discrete_averages
from ..aggregation.models import Interval, QuantityKind, Sample, TimeRange
from .base import SampleSource

logger = logging.getLogger(__name__)


class InMemorySampleSource(SampleSource):
    """
    Holds samples per quantity in plain lists.

    Args:
        samples:  Initial walking-speed samples.
    """

    name = "memory"

    def __init__(self, samples: Iterable[Sample] = ()) -> None:
        self._samples: dict[QuantityKind, list[Sample]] = defaultdict(list)
        for sample in samples:
            self.add(sample)

    def add(self, sample: Sample, quantity: QuantityKind = QuantityKind.WALKING_SPEED) -> None:
        self._samples[quantity].append(sample)

    def count(self, quantity: QuantityKind = QuantityKind.WALKING_SPEED) -> int:
        return len(self._samples[quantity])

    async def request_bucketed_average(
        self,
        quantity: QuantityKind,
        time_range: TimeRange,
        interval: Interval,
    ) -> Sequence[float | None]:
        # Snapshot first so concurrent add() calls cannot change this query.
        snapshot = list(self._samples[quantity])
        await asyncio.sleep(0)
        averages = discrete_averages(snapshot, time_range, interval)
        logger.debug(
            "memory source: %s %r %r → %d bucket(s)",
            quantity.value, time_range, interval, len(averages),
        )
        return averages
