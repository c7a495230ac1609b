"""
api/routes/samples.py

POST /api/samples — ingest a batch of walking-speed samples
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException

from ...aggregation.models import QuantityKind, Sample
from ...storage.repository import SampleRepository
from ..serializers import IngestResponse, SampleBatchRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/samples", tags=["samples"])


def _get_repo() -> SampleRepository:
    """FastAPI dependency — replaced in tests via app.dependency_overrides."""
    from ..main import get_repository
    return get_repository()


@router.post("", response_model=IngestResponse, status_code=201)
async def ingest_samples(
    body: SampleBatchRequest,
    repo: SampleRepository = Depends(_get_repo),
) -> IngestResponse:
    """Store a batch of samples in one transaction."""
    samples = [Sample(timestamp=s.timestamp, value=s.value) for s in body.samples]
    try:
        inserted = await asyncio.to_thread(
            repo.save_samples, samples, QuantityKind.WALKING_SPEED
        )
    except sqlite3.Error as exc:
        logger.error("Sample ingest failed: %s", exc)
        raise HTTPException(status_code=503, detail="Sample store unavailable") from exc
    total = await asyncio.to_thread(repo.count_samples, QuantityKind.WALKING_SPEED)
    logger.info("Ingested %d sample(s) — total=%d", inserted, total)
    return IngestResponse(inserted=inserted, total=total)
