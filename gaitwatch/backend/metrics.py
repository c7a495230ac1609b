"""
backend/metrics.py

Lightweight thread-safe counters for ingestion and chart delivery.
No external dependencies — uses Python's threading.Lock.

Usage:
    from gaitwatch.backend.metrics import METRICS
    METRICS.samples_ingested.inc()
    print(METRICS.as_dict())
"""

import threading


class Counter:
    """A thread-safe integer counter."""

    __slots__ = ("_value", "_lock")

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:  # pragma: no cover
        return f"Counter({self._value})"


class Metrics:
    """Singleton holding all process-wide counters."""

    def __init__(self) -> None:
        # --- Storage ---
        self.samples_ingested: Counter = Counter()
        """Samples written to the sample store."""

        # --- Dashboard ---
        self.charts_rendered: Counter = Counter()
        """Chart results handed to a renderer."""

        self.charts_failed: Counter = Counter()
        """Preset refreshes that ended in an error."""

        self.charts_dropped: Counter = Counter()
        """Chart results discarded because the chart queue was full."""

    def as_dict(self) -> dict:
        """Return all counters as a plain dict (safe for JSON serialisation)."""
        return {
            "samples_ingested": self.samples_ingested.value,
            "charts_rendered": self.charts_rendered.value,
            "charts_failed": self.charts_failed.value,
            "charts_dropped": self.charts_dropped.value,
        }

    def reset_all(self) -> None:
        """Reset every counter to zero (useful in tests)."""
        for attr in vars(self).values():
            if isinstance(attr, Counter):
                attr.reset()


# Module-level singleton — import from here everywhere
METRICS = Metrics()
