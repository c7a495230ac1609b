"""
api/serializers.py

Request / response models for the HTTP API.
"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, Field

from ..render.models import ChartSeries


class ChartResponse(BaseModel):
    preset: str
    title: str
    unit: str
    values: list[float]
    labels: list[str]
    y_minimum: float = 0.0
    generated_at: float

    @classmethod
    def from_series(cls, series: ChartSeries) -> "ChartResponse":
        return cls(**series.to_dict())


class SampleIn(BaseModel):
    timestamp: AwareDatetime
    value: float = Field(ge=0.0, allow_inf_nan=False)


class SampleBatchRequest(BaseModel):
    samples: list[SampleIn] = Field(min_length=1, max_length=10_000)


class IngestResponse(BaseModel):
    inserted: int
    total: int


class StatsResponse(BaseModel):
    sample_count: int
    latest_sample_timestamp: float | None
    pipeline_stats: dict[str, int]
    counters: dict[str, int]
