"""
api/routes/charts.py

GET /api/charts           — every preset, aggregated on demand
GET /api/charts/{preset}  — one preset

Charts are computed fresh per request; nothing is cached between calls.
Pass ?now=<ISO-8601 with offset> to resolve presets against a fixed instant.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import AwareDatetime

from ...aggregation.aggregator import AggregationPipeline
from ...aggregation.errors import DataSourceError, LabelCountMismatch
from ...aggregation.presets import PRESETS, QueryPreset, get_preset
from ...config import settings
from ...render.models import ChartSeries
from ..serializers import ChartResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/charts", tags=["charts"])


def _get_pipeline() -> AggregationPipeline:
    """FastAPI dependency — replaced in tests via app.dependency_overrides."""
    from ..main import get_pipeline
    return get_pipeline()


async def _build_chart(
    pipeline: AggregationPipeline,
    preset: QueryPreset,
    now: datetime | None,
) -> ChartResponse:
    try:
        result = await pipeline.aggregate_preset(preset, now)
    except DataSourceError as exc:
        logger.error("Chart %r unavailable: %s", preset.name, exc)
        raise HTTPException(status_code=502, detail=f"Sample source failed: {exc.cause}") from exc
    except LabelCountMismatch as exc:
        logger.error("Chart %r bucket mismatch: %s", preset.name, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    series = ChartSeries.from_result(preset, result, pipeline.quantity)
    return ChartResponse.from_series(series)


@router.get("", response_model=list[ChartResponse])
async def list_charts(
    now: Annotated[AwareDatetime | None, Query()] = None,
    pipeline: AggregationPipeline = Depends(_get_pipeline),
) -> list[ChartResponse]:
    """Return the daily, weekly and monthly charts."""
    if now is None:
        now = datetime.now(settings.tzinfo)
    return [await _build_chart(pipeline, p, now) for p in PRESETS.values()]


@router.get("/{preset_name}", response_model=ChartResponse)
async def get_chart(
    preset_name: str,
    now: Annotated[AwareDatetime | None, Query()] = None,
    pipeline: AggregationPipeline = Depends(_get_pipeline),
) -> ChartResponse:
    """Return one chart by preset name."""
    try:
        preset = get_preset(preset_name)
    except KeyError:
        raise HTTPException(
            status_code=404,
            detail=f"Preset {preset_name!r} not found — expected one of {sorted(PRESETS)}",
        ) from None
    return await _build_chart(pipeline, preset, now)
