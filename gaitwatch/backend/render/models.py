"""
render/models.py

ChartSeries — what a bar-chart view needs to draw one preset.

Mirrors the chart configuration of the walking-speed screen: a header
title, a single data series titled with the unit, horizontal axis markers
taken from the preset labels, and a y-axis pinned at zero.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from ..aggregation.models import AggregationResult, QuantityKind
from ..aggregation.presets import QueryPreset


@dataclass(frozen=True)
class ChartSeries:
    preset: str
    title: str
    """Chart header, e.g. 'Daily'."""

    unit: str
    """Series title, e.g. 'm/s'."""

    values: tuple[float, ...]
    labels: tuple[str, ...]
    """Horizontal axis markers, parallel to values."""

    y_minimum: float = 0.0
    generated_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if len(self.values) != len(self.labels):
            raise ValueError(
                f"chart {self.preset!r}: {len(self.values)} value(s) for "
                f"{len(self.labels)} label(s)"
            )

    @classmethod
    def from_result(
        cls,
        preset: QueryPreset,
        result: AggregationResult,
        quantity: QuantityKind = QuantityKind.WALKING_SPEED,
    ) -> "ChartSeries":
        return cls(
            preset=preset.name,
            title=preset.title,
            unit=quantity.unit,
            values=result.values,
            labels=result.labels,
        )

    @property
    def y_maximum(self) -> float:
        return max((self.y_minimum, *self.values))

    def to_dict(self) -> dict:
        return {
            "preset": self.preset,
            "title": self.title,
            "unit": self.unit,
            "values": list(self.values),
            "labels": list(self.labels),
            "y_minimum": self.y_minimum,
            "generated_at": self.generated_at,
        }
