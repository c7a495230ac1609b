"""storage/__init__.py"""
from .database import Database
from .repository import SampleRepository

__all__ = ["Database", "SampleRepository"]
