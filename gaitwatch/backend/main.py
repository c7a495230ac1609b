from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import NoReturn

import uvicorn

from .aggregation import AggregationPipeline
from .api.main import create_app, set_pipeline, set_repository
from .config import settings
from .dashboard import Dashboard, render_consumer
from .metrics import METRICS
from .pipeline import init_queues
from .render import ChartRenderer, ConsoleChartRenderer
from .sources import SampleSource, SqliteSampleSource
from .storage import Database, SampleRepository

logger = logging.getLogger("gaitwatch.main")


# ---------------------------------------------------------------------------
# --once: render every preset to the console and exit
# ---------------------------------------------------------------------------

async def run_once(source: SampleSource, renderer: ChartRenderer) -> int:
    """
    Refresh all presets once, render them, return the number of failures.

    Failures count both presets that could not be aggregated and charts the
    renderer could not draw.
    """
    failed_before = METRICS.charts_failed.value
    queue = init_queues(chart_size=settings.CHART_QUEUE_SIZE)
    shutdown_event = asyncio.Event()

    pipeline = AggregationPipeline(source, timeout=settings.QUERY_TIMEOUT_SECONDS)
    dashboard = Dashboard(pipeline, queue)

    consumer = asyncio.create_task(
        render_consumer(queue, renderer, shutdown_event), name="render"
    )
    try:
        await dashboard.refresh()
        await queue.join()
    finally:
        shutdown_event.set()
        await consumer

    logger.info("Dashboard stats=%s pipeline=%s", dashboard.stats, pipeline.stats)
    return METRICS.charts_failed.value - failed_before


# ---------------------------------------------------------------------------
# Default: serve the API (optionally refreshing the console every N seconds)
# ---------------------------------------------------------------------------

async def serve(db: Database, watch_interval: float | None) -> None:
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _signal_handler(_signum, _frame) -> None:
        logger.info("Shutdown signal received")
        loop.call_soon_threadsafe(shutdown_event.set)

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    repo = SampleRepository(db)
    pipeline = AggregationPipeline(
        SqliteSampleSource(repo), timeout=settings.QUERY_TIMEOUT_SECONDS
    )
    set_repository(repo)
    set_pipeline(pipeline)

    app = create_app()
    uv_config = uvicorn.Config(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level="warning",
        loop="none",
    )
    uv_server = uvicorn.Server(uv_config)

    tasks = [asyncio.create_task(uv_server.serve(), name="api")]
    if watch_interval:
        queue = init_queues(chart_size=settings.CHART_QUEUE_SIZE)
        dashboard = Dashboard(pipeline, queue)
        tasks += [
            asyncio.create_task(
                dashboard.run(shutdown_event, interval=watch_interval), name="dashboard"
            ),
            asyncio.create_task(
                render_consumer(queue, ConsoleChartRenderer(), shutdown_event), name="render"
            ),
        ]

    logger.info(
        "GaitWatch — API=http://%s:%d db=%r tz=%s watch=%s",
        settings.API_HOST, settings.API_PORT, db.db_path, settings.TIMEZONE,
        f"{watch_interval:.0f}s" if watch_interval else "off",
    )

    await shutdown_event.wait()

    uv_server.should_exit = True
    for t in tasks[1:]:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    logger.info("Final stats — pipeline=%s counters=%s", pipeline.stats, METRICS.as_dict())
    logger.info("GaitWatch stopped cleanly")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="GaitWatch walking-speed charts")
    parser.add_argument("--db", default=settings.DB_PATH, help="SQLite sample store")
    parser.add_argument(
        "--once", action="store_true",
        help="print the daily/weekly/monthly charts and exit",
    )
    parser.add_argument(
        "--watch", type=float, default=None, metavar="SECONDS",
        help="while serving, re-print the charts every SECONDS",
    )
    parser.add_argument("--no-colour", action="store_true", help="plain console output")
    parser.add_argument(
        "--log-level", default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> NoReturn:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if args.watch is not None and args.watch <= 0:
        print("ERROR: --watch must be positive", file=sys.stderr)
        sys.exit(2)

    db = Database(args.db)
    db.init_schema()
    try:
        if args.once:
            source = SqliteSampleSource(SampleRepository(db))
            renderer = ConsoleChartRenderer(colour=not args.no_colour)
            failures = asyncio.run(run_once(source, renderer))
            sys.exit(1 if failures else 0)
        asyncio.run(serve(db, watch_interval=args.watch))
    finally:
        db.close()
    sys.exit(0)


if __name__ == "__main__":
    main()
