"""
aggregation/errors.py

Errors surfaced by the aggregation pipeline. Neither is retried.
"""

from __future__ import annotations


class GaitWatchError(Exception):
    """Base class for every error raised by gaitwatch."""


class DataSourceError(GaitWatchError):
    """The sample source failed, timed out or denied access."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"sample source failed: {cause!r}")


class LabelCountMismatch(GaitWatchError):
    """
    Label count and bucket count disagree.

    Raised before any request when the caller's labels do not match the
    buckets implied by the range, and after the request when the source
    returns a different number of buckets than expected.
    """

    def __init__(self, expected: int, actual: int, *, from_source: bool = False) -> None:
        self.expected = expected
        self.actual = actual
        self.from_source = from_source
        what = "source returned" if from_source else "caller supplied"
        super().__init__(
            f"expected {expected} bucket(s) — {what} {actual}"
        )
