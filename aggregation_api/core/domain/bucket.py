"""Aggregated buckets and the time windows they cover."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum


class BucketKind(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"


class Granularity(Enum):
    """Fixed bucket sizes. Only hour and day exist."""
    HOUR = timedelta(hours=1)
    DAY = timedelta(days=1)

    @property
    def kind(self) -> BucketKind:
        return BucketKind.HOURLY if self is Granularity.HOUR else BucketKind.DAILY


@dataclass(frozen=True)
class Window:
    """Half-open time interval [start, end)."""
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class HourBucket:
    date: date
    hour: int
    value: float

    @property
    def date_label(self) -> str:
        return f"{self.date.day:02d}/{self.date.month:02d}"

    @property
    def hour_label(self) -> str:
        return f"{self.hour:02d}:00"


@dataclass(frozen=True)
class DayBucket:
    date: date
    value: float

    @property
    def date_label(self) -> str:
        return f"{self.date.day:02d}/{self.date.month:02d}"


@dataclass(frozen=True)
class StoredBucket:
    """Bucket row as persisted by the service variant, keyed by window start."""
    kind: BucketKind
    bucket_start: datetime
    value: float
