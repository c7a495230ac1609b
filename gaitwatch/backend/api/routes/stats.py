"""
api/routes/stats.py

GET /api/stats — sample-store size + live pipeline counters
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from ...aggregation.aggregator import AggregationPipeline
from ...aggregation.models import QuantityKind
from ...metrics import METRICS
from ...storage.repository import SampleRepository
from ..serializers import StatsResponse

router = APIRouter(prefix="/stats", tags=["stats"])


def _get_repo() -> SampleRepository:
    from ..main import get_repository
    return get_repository()


def _get_pipeline() -> AggregationPipeline:
    from ..main import get_pipeline
    return get_pipeline()


@router.get("", response_model=StatsResponse)
async def get_stats(
    repo: SampleRepository = Depends(_get_repo),
    pipeline: AggregationPipeline = Depends(_get_pipeline),
) -> StatsResponse:
    """Return sample-store totals plus live pipeline counters."""
    count = await asyncio.to_thread(repo.count_samples, QuantityKind.WALKING_SPEED)
    latest = await asyncio.to_thread(repo.latest_sample, QuantityKind.WALKING_SPEED)
    return StatsResponse(
        sample_count=count,
        latest_sample_timestamp=latest.timestamp.timestamp() if latest else None,
        pipeline_stats=dict(pipeline.stats),
        counters=METRICS.as_dict(),
    )
