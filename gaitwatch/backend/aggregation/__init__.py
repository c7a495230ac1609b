"""
aggregation/__init__.py

Public API for the aggregation sub-package.
"""

from .aggregator import EMPTY_BUCKET_VALUE, AggregationPipeline
from .buckets import Bucket, BucketAccumulator, bucket_count, discrete_averages, iter_buckets
from .errors import DataSourceError, GaitWatchError, LabelCountMismatch
from .models import AggregationResult, Interval, IntervalUnit, QuantityKind, Sample, TimeRange
from .presets import DAILY, MONTHLY, PRESETS, WEEKLY, QueryPreset, get_preset

__all__ = [
    "AggregationPipeline",
    "EMPTY_BUCKET_VALUE",
    "Bucket",
    "BucketAccumulator",
    "bucket_count",
    "discrete_averages",
    "iter_buckets",
    "GaitWatchError",
    "DataSourceError",
    "LabelCountMismatch",
    "AggregationResult",
    "Interval",
    "IntervalUnit",
    "QuantityKind",
    "Sample",
    "TimeRange",
    "QueryPreset",
    "PRESETS",
    "DAILY",
    "WEEKLY",
    "MONTHLY",
    "get_preset",
]
