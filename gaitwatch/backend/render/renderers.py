"""
render/renderers.py

ChartRenderer contract and the console bar-chart renderer.

Renderers are called from the dashboard's render consumer only, never
from inside an aggregation coroutine.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import TextIO

from ..aggregation.models import AggregationResult
from ..aggregation.presets import QueryPreset
from .models import ChartSeries

logger = logging.getLogger(__name__)

_ANSI = {
    "BAR":   "\033[96m",
    "TITLE": "\033[1m",
    "RESET": "\033[0m",
}

_BAR_WIDTH = 40


class ChartRenderer(ABC):
    """Accepts ordered values + ordered labels of equal length. Returns nothing."""

    name: str = ""

    @abstractmethod
    def render(self, preset: QueryPreset, result: AggregationResult) -> None:
        ...

    def __repr__(self) -> str:
        return f"<ChartRenderer:{self.name}>"


class ConsoleChartRenderer(ChartRenderer):
    """
    Args:
        stream: Where to print (stdout by default).
        colour: Wrap bars in ANSI colour codes.
    """

    name = "console"

    def __init__(self, stream: TextIO | None = None, colour: bool = True) -> None:
        self._stream = stream
        self._colour = colour

    def render(self, preset: QueryPreset, result: AggregationResult) -> None:
        series = ChartSeries.from_result(preset, result)
        stream = self._stream or sys.stdout
        print(self.format(series), file=stream, flush=True)
        logger.debug("Rendered chart %r to console", series.preset)

    def format(self, series: ChartSeries) -> str:
        top = series.y_maximum
        label_width = max((len(l) for l in series.labels), default=0)
        lines = [self._paint("TITLE", f"{series.title} ({series.unit})")]
        for label, value in zip(series.labels, series.values):
            filled = round(_BAR_WIDTH * value / top) if top > 0 else 0
            bar = self._paint("BAR", "█" * filled)
            lines.append(f"  {label:>{label_width}} │{bar} {value:.2f}")
        return "\n".join(lines)

    def _paint(self, key: str, text: str) -> str:
        if not self._colour or not text:
            return text
        return f"{_ANSI[key]}{text}{_ANSI['RESET']}"
