"""
backend/dashboard.py

Dashboard — refreshes every preset and hands results to the chart queue.
render_consumer — drains the chart queue into a ChartRenderer.

Scheduling:
  - refresh() runs all presets concurrently (asyncio.gather); each preset
    owns its own result, so order of completion does not matter
  - "now" is captured once per refresh so every preset sees the same day
  - Results go onto the chart queue via safe_put(); the renderer is only
    ever called from render_consumer(), on the loop that owns the queue
  - GaitWatchError (DataSourceError / LabelCountMismatch) is logged and
    counted per preset; anything else propagates out of refresh(), and
    run() logs it and tries again on the next tick

Stats dict:
    refreshes         — completed refresh() calls
    charts_delivered  — results enqueued for rendering
    charts_failed     — presets that ended in a GaitWatchError
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .aggregation.aggregator import AggregationPipeline
from .aggregation.errors import GaitWatchError
from .aggregation.models import AggregationResult
from .aggregation.presets import PRESETS, QueryPreset
from .config import settings
from .metrics import METRICS
from .pipeline import safe_put
from .render.renderers import ChartRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartUpdate:
    """One finished preset, travelling from the dashboard to the renderer."""

    preset: QueryPreset
    result: AggregationResult


class Dashboard:
    """
    Args:
        pipeline:     AggregationPipeline bound to a sample source.
        output_queue: asyncio.Queue[ChartUpdate] drained by render_consumer().
        presets:      Presets to refresh (daily / weekly / monthly by default).
    """

    def __init__(
        self,
        pipeline: AggregationPipeline,
        output_queue: asyncio.Queue,
        presets: Iterable[QueryPreset] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._output_q = output_queue
        self.presets: list[QueryPreset] = list(presets if presets is not None else PRESETS.values())

        self.stats: dict[str, int] = {
            "refreshes": 0,
            "charts_delivered": 0,
            "charts_failed": 0,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def refresh(self, now: datetime | None = None) -> dict[str, AggregationResult]:
        """
        Aggregate every preset once and enqueue the successful results.

        Returns:
            preset name → AggregationResult for the presets that succeeded.
        """
        if now is None:
            now = datetime.now(settings.tzinfo)

        outcomes = await asyncio.gather(
            *(self._pipeline.aggregate_preset(p, now) for p in self.presets),
            return_exceptions=True,
        )

        results: dict[str, AggregationResult] = {}
        unexpected: BaseException | None = None
        for preset, outcome in zip(self.presets, outcomes):
            if isinstance(outcome, GaitWatchError):
                self.stats["charts_failed"] += 1
                METRICS.charts_failed.inc()
                logger.error("Preset %r failed: %s", preset.name, outcome)
                continue
            if isinstance(outcome, BaseException):
                unexpected = unexpected or outcome
                continue
            results[preset.name] = outcome
            await self._emit(ChartUpdate(preset=preset, result=outcome))

        self.stats["refreshes"] += 1
        if unexpected is not None:
            raise unexpected
        return results

    async def run(self, shutdown_event: asyncio.Event, interval: float = 60.0) -> None:
        """Refresh every ``interval`` seconds until shutdown_event is set."""
        logger.info(
            "Dashboard started — presets=%s interval=%.0fs",
            [p.name for p in self.presets], interval,
        )
        while not shutdown_event.is_set():
            try:
                await self.refresh()
            except Exception:
                logger.exception("Dashboard refresh failed; retrying in %.0fs", interval)
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.info("Dashboard exiting — stats: %s", self.stats)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _emit(self, update: ChartUpdate) -> None:
        """Put a finished ChartUpdate on the output queue."""
        enqueued = await safe_put(self._output_q, update)
        if enqueued:
            self.stats["charts_delivered"] += 1
            logger.debug("Enqueued %s %r", update.preset.name, update.result)


# ---------------------------------------------------------------------------
# Render consumer — chart_queue → renderer
# ---------------------------------------------------------------------------

async def render_consumer(
    queue: asyncio.Queue,
    renderer: ChartRenderer,
    shutdown_event: asyncio.Event,
) -> None:
    """
    Pull ChartUpdates off ``queue`` and render them until shutdown.

    A renderer error (e.g. BrokenPipeError on a closed stdout) is logged and
    counted in METRICS.charts_failed; the update is still marked done so
    queue.join() returns.
    """
    logger.info("Render consumer started (renderer=%r)", renderer)
    while not shutdown_event.is_set():
        try:
            update: ChartUpdate = await asyncio.wait_for(queue.get(), timeout=0.5)
        except asyncio.TimeoutError:
            continue
        try:
            renderer.render(update.preset, update.result)
            METRICS.charts_rendered.inc()
        except Exception:
            METRICS.charts_failed.inc()
            logger.exception("Renderer %r failed on %s", renderer, update.preset.name)
        finally:
            queue.task_done()
    logger.info("Render consumer exiting")
