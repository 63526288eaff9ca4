"""Batch aggregation of readings into hourly and daily buckets.

Sums are accumulated in input order, so a fixed input always yields the same
floating point result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List

from ..core.domain.bucket import DayBucket, HourBucket
from ..core.domain.reading import Reading
from ..core.validation.timestamp_parser import ensure_utc

logger = logging.getLogger(__name__)


@dataclass
class BatchAggregates:
    """date -> (hour -> sum) and date -> sum."""
    hourly: Dict[date, Dict[int, float]] = field(default_factory=dict)
    daily: Dict[date, float] = field(default_factory=dict)

    def hourly_rows(self) -> List[HourBucket]:
        """Hourly buckets sorted by date, then hour of day."""
        return [
            HourBucket(date=day, hour=hour, value=value)
            for day in sorted(self.hourly)
            for hour, value in sorted(self.hourly[day].items())
        ]

    def daily_rows(self) -> List[DayBucket]:
        """Daily buckets sorted by date."""
        return [DayBucket(date=day, value=value) for day, value in sorted(self.daily.items())]


def aggregate_readings(readings: Iterable[Reading]) -> BatchAggregates:
    """Bucket readings by calendar day and hour of day in a single pass."""
    result = BatchAggregates()
    count = 0

    for reading in readings:
        ts = ensure_utc(reading.timestamp)
        day = ts.date()

        hours = result.hourly.setdefault(day, {})
        hours[ts.hour] = hours.get(ts.hour, 0.0) + reading.value
        result.daily[day] = result.daily.get(day, 0.0) + reading.value
        count += 1

    logger.debug(
        "[Aggregator] Aggregated readings=%d days=%d hourly_buckets=%d",
        count,
        len(result.daily),
        sum(len(h) for h in result.hourly.values()),
    )
    return result
