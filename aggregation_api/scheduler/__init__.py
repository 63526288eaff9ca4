"""Periodic aggregation - tick handlers and the scheduler that drives them."""

from .cycle import AggregationCycle, CycleState, CycleStats
from .periodic import AggregationScheduler

__all__ = [
    "AggregationCycle",
    "AggregationScheduler",
    "CycleState",
    "CycleStats",
]
