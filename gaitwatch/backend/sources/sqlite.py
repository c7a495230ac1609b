"""
sources/sqlite.py

SampleSource backed by the SQLite sample store.

The repository read is blocking, so it runs in a worker thread to keep the
event loop free; bucketing happens on the loop afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..aggregation.buckets import discrete_averages
from ..aggregation.models import Interval, QuantityKind, TimeRange
from ..storage.repository import SampleRepository
from .base import SampleSource

logger = logging.getLogger(__name__)


class SqliteSampleSource(SampleSource):
    """
    Args:
        repository: SampleRepository wrapping an initialised Database.
    """

    name = "sqlite"

    def __init__(self, repository: SampleRepository) -> None:
        self._repo = repository

    async def request_bucketed_average(
        self,
        quantity: QuantityKind,
        time_range: TimeRange,
        interval: Interval,
    ) -> Sequence[float | None]:
        samples = await asyncio.to_thread(
            self._repo.get_samples, quantity, time_range.start, time_range.end
        )
        averages = discrete_averages(samples, time_range, interval)
        logger.debug(
            "sqlite source: %s %r %r — %d sample(s) → %d bucket(s)",
            quantity.value, time_range, interval, len(samples), len(averages),
        )
        return averages
