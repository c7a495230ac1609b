"""
storage/repository.py

SampleRepository — read/write access to the samples table.

Writes raise sqlite3.Error to the caller; ingestion is all-or-nothing per
batch. Reads return Sample objects in timestamp order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from ..aggregation.models import QuantityKind, Sample
from ..metrics import METRICS
from .database import Database

logger = logging.getLogger(__name__)


def _to_epoch(ts: datetime) -> float:
    return ts.timestamp()


def _from_epoch(epoch: float) -> datetime:
    return datetime.fromtimestamp(epoch, tz=timezone.utc)


class SampleRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    # ==================================================================
    # Write methods
    # ==================================================================

    def save_sample(
        self,
        sample: Sample,
        quantity: QuantityKind = QuantityKind.WALKING_SPEED,
    ) -> None:
        self.save_samples([sample], quantity=quantity)

    def save_samples(
        self,
        samples: Iterable[Sample],
        quantity: QuantityKind = QuantityKind.WALKING_SPEED,
    ) -> int:
        """Insert a batch of samples in one transaction. Returns rows inserted."""
        rows = [(quantity.value, _to_epoch(s.timestamp), float(s.value)) for s in samples]
        if not rows:
            return 0
        self._db.executemany(
            "INSERT INTO samples (quantity, timestamp, value) VALUES (?, ?, ?)",
            rows,
        )
        METRICS.samples_ingested.inc(len(rows))
        logger.debug("Saved %d %s sample(s)", len(rows), quantity.value)
        return len(rows)

    # ==================================================================
    # Read methods
    # ==================================================================

    def get_samples(
        self,
        quantity: QuantityKind,
        start: datetime,
        end: datetime,
    ) -> list[Sample]:
        """Samples with start <= timestamp < end, oldest first."""
        rows = self._db.execute(
            """
            SELECT timestamp, value FROM samples
            WHERE quantity = ? AND timestamp >= ? AND timestamp < ?
            ORDER BY timestamp ASC, id ASC
            """,
            (quantity.value, _to_epoch(start), _to_epoch(end)),
        )
        return [Sample(timestamp=_from_epoch(r["timestamp"]), value=r["value"]) for r in rows]

    def count_samples(self, quantity: QuantityKind = QuantityKind.WALKING_SPEED) -> int:
        rows = self._db.execute(
            "SELECT COUNT(*) AS n FROM samples WHERE quantity = ?",
            (quantity.value,),
        )
        return rows[0]["n"]

    def latest_sample(self, quantity: QuantityKind = QuantityKind.WALKING_SPEED) -> Sample | None:
        rows = self._db.execute(
            """
            SELECT timestamp, value FROM samples
            WHERE quantity = ?
            ORDER BY timestamp DESC, id DESC
            LIMIT 1
            """,
            (quantity.value,),
        )
        if not rows:
            return None
        return Sample(timestamp=_from_epoch(rows[0]["timestamp"]), value=rows[0]["value"])
