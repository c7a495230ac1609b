"""sources/__init__.py"""
from .base import SampleSource
from .memory import InMemorySampleSource
from .sqlite import SqliteSampleSource

__all__ = ["SampleSource", "InMemorySampleSource", "SqliteSampleSource"]
