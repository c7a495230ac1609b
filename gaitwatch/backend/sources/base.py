"""
sources/base.py

Abstract base class every sample source must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..aggregation.models import Interval, QuantityKind, TimeRange


class SampleSource(ABC):
    """
    Contract between the aggregation pipeline and a health-data store.

    request_bucketed_average() MUST:
        - Return one entry per bucket of (time_range, interval), in
          chronological order, anchored at time_range.start
        - Use None for a bucket with no samples
        - Raise on failure (the pipeline wraps it as DataSourceError)
        - Be safe to call concurrently for independent queries
    """

    name: str = ""

    @abstractmethod
    async def request_bucketed_average(
        self,
        quantity: QuantityKind,
        time_range: TimeRange,
        interval: Interval,
    ) -> Sequence[float | None]:
        ...

    def __repr__(self) -> str:
        return f"<SampleSource:{self.name}>"
