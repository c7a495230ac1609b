"""
tests/test_renderer.py

Tests for render/ — ChartSeries construction and console bar charts.
"""

from __future__ import annotations

import io

import pytest

from gaitwatch.backend.aggregation.models import AggregationResult
from gaitwatch.backend.aggregation.presets import DAILY, WEEKLY
from gaitwatch.backend.render.models import ChartSeries
from gaitwatch.backend.render.renderers import ConsoleChartRenderer


def daily_result() -> AggregationResult:
    return AggregationResult(
        values=(1.2, 0.0, 1.5, 1.3, 0.0, 1.6, 1.4),
        labels=DAILY.labels,
    )


class TestChartSeries:

    def test_from_result(self):
        series = ChartSeries.from_result(DAILY, daily_result())
        assert series.preset == "daily"
        assert series.title == "Daily"
        assert series.unit == "m/s"
        assert series.y_minimum == 0.0
        assert series.values == daily_result().values
        assert series.labels == DAILY.labels

    def test_unequal_lengths_rejected(self):
        with pytest.raises(ValueError):
            ChartSeries(preset="x", title="X", unit="m/s", values=(1.0,), labels=("a", "b"))

    def test_y_maximum(self):
        assert ChartSeries.from_result(DAILY, daily_result()).y_maximum == 1.6

    def test_y_maximum_all_zero(self):
        result = AggregationResult(values=(0.0,) * 4, labels=WEEKLY.labels)
        assert ChartSeries.from_result(WEEKLY, result).y_maximum == 0.0

    def test_to_dict_is_json_friendly(self):
        d = ChartSeries.from_result(DAILY, daily_result()).to_dict()
        assert d["values"] == [1.2, 0.0, 1.5, 1.3, 0.0, 1.6, 1.4]
        assert d["labels"] == list(DAILY.labels)
        assert isinstance(d["generated_at"], float)


class TestConsoleChartRenderer:

    def test_renders_one_row_per_label(self):
        out = io.StringIO()
        ConsoleChartRenderer(stream=out, colour=False).render(DAILY, daily_result())
        lines = out.getvalue().rstrip("\n").split("\n")
        assert lines[0] == "Daily (m/s)"
        assert len(lines) == 1 + 7
        assert lines[1].strip().startswith("Sun")
        assert lines[1].endswith("1.20")

    def test_longest_bar_is_maximum(self):
        out = io.StringIO()
        ConsoleChartRenderer(stream=out, colour=False).render(DAILY, daily_result())
        rows = out.getvalue().rstrip("\n").split("\n")[1:]
        bars = [row.count("█") for row in rows]
        assert max(bars) == bars[5]  # Fri = 1.6
        assert bars[1] == 0 and bars[4] == 0

    def test_all_zero_chart_has_no_bars(self):
        out = io.StringIO()
        result = AggregationResult(values=(0.0,) * 4, labels=WEEKLY.labels)
        ConsoleChartRenderer(stream=out, colour=False).render(WEEKLY, result)
        assert "█" not in out.getvalue()

    def test_colour_codes(self):
        out = io.StringIO()
        ConsoleChartRenderer(stream=out, colour=True).render(DAILY, daily_result())
        assert "\033[" in out.getvalue()
