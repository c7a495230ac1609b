"""render/__init__.py"""
from .models import ChartSeries
from .renderers import ChartRenderer, ConsoleChartRenderer

__all__ = ["ChartSeries", "ChartRenderer", "ConsoleChartRenderer"]
