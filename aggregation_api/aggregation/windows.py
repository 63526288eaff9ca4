"""Window arithmetic for hourly and daily buckets."""

from __future__ import annotations

from datetime import datetime

from ..core.domain.bucket import Granularity, Window
from ..core.validation.timestamp_parser import ensure_utc


def truncate(instant: datetime, granularity: Granularity) -> datetime:
    """Start of the hour/day containing `instant`, in UTC."""
    instant = ensure_utc(instant)
    if granularity is Granularity.HOUR:
        return instant.replace(minute=0, second=0, microsecond=0)
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def window_for(instant: datetime, granularity: Granularity) -> Window:
    start = truncate(instant, granularity)
    return Window(start=start, end=start + granularity.value)


def previous_window(window: Window, granularity: Granularity) -> Window:
    return Window(start=window.start - granularity.value, end=window.start)


def seconds_until_next_boundary(instant: datetime, granularity: Granularity) -> float:
    """Seconds from `instant` to the end of its window."""
    instant = ensure_utc(instant)
    return (window_for(instant, granularity).end - instant).total_seconds()
