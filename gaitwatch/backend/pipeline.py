"""
backend/pipeline.py

The chart queue that carries finished aggregation results to the render
consumer, and the ring-buffer safe_put() helper used to fill it.

The queue belongs to the event loop that owns presentation state: the
dashboard puts results on it, render_consumer() takes them off and calls
the renderer. Aggregation coroutines never call a renderer directly.

safe_put() drops the *oldest* item when the queue is full (ring-buffer
semantics) rather than blocking the producer; a stale chart is worth less
than a fresh one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .metrics import METRICS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Queue construction
# ---------------------------------------------------------------------------

def init_queues(chart_size: int = 32) -> asyncio.Queue:
    """
    Create a chart queue for the caller's event loop.
    Each run_once() / serve() owns its own queue; nothing is shared globally.
    """
    queue: asyncio.Queue = asyncio.Queue(maxsize=chart_size)
    logger.info("Chart queue initialised — size=%d", chart_size)
    return queue


# ---------------------------------------------------------------------------
# Ring-buffer put helper
# ---------------------------------------------------------------------------

async def safe_put(queue: asyncio.Queue, item: Any) -> bool:
    """
    Non-blocking enqueue with ring-buffer drop semantics.

    If the queue is full, the *oldest* item is discarded to make room,
    METRICS.charts_dropped is incremented, and a warning is logged.

    Returns:
        True  — item was enqueued successfully.
        False — item could not be enqueued (extremely unlikely race condition).
    """
    if queue.full():
        try:
            queue.get_nowait()  # discard oldest item
            queue.task_done()
            METRICS.charts_dropped.inc()
            logger.warning(
                "Queue full (%d/%d) — oldest item dropped to make room",
                queue.qsize(),
                queue.maxsize,
            )
        except asyncio.QueueEmpty:
            pass  # queue was drained between the full() check and get_nowait()

    try:
        queue.put_nowait(item)
        return True
    except asyncio.QueueFull:
        METRICS.charts_dropped.inc()
        logger.error("safe_put: queue still full after drop — item lost")
        return False
