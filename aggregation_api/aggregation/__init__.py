"""Bucketed aggregation - batch mode and window helpers."""

from .batch import BatchAggregates, aggregate_readings
from .windows import previous_window, seconds_until_next_boundary, truncate, window_for

__all__ = [
    "BatchAggregates",
    "aggregate_readings",
    "previous_window",
    "seconds_until_next_boundary",
    "truncate",
    "window_for",
]
