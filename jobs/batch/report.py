"""CSV and console output for batch aggregates.

One writer per bucket kind. Rows are sorted by calendar date, then hour;
dates are rendered DD/MM, hours HH:00 and values with two decimals.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd

from aggregation_api.core.domain.bucket import DayBucket, HourBucket
from common.errors import InputError

logger = logging.getLogger(__name__)

HOURLY_HEADERS = ["Date", "Hour", "kWh Value"]
DAILY_HEADERS = ["Date", "kWh Value"]
VALUE_FORMAT = "%.2f"


def hourly_frame(rows: List[HourBucket]) -> pd.DataFrame:
    return pd.DataFrame(
        [(r.date_label, r.hour_label, float(r.value)) for r in rows],
        columns=HOURLY_HEADERS,
    ).astype({"kWh Value": "float64"})


def daily_frame(rows: List[DayBucket]) -> pd.DataFrame:
    return pd.DataFrame(
        [(r.date_label, float(r.value)) for r in rows],
        columns=DAILY_HEADERS,
    ).astype({"kWh Value": "float64"})


def _write_frame(frame: pd.DataFrame, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path, index=False, float_format=VALUE_FORMAT, lineterminator="\n")
    except OSError as e:
        raise InputError(f"Cannot write {path}: {e}") from e
    logger.info("[Report] Wrote %d rows to %s", len(frame), path)


def write_hourly_csv(rows: List[HourBucket], path: Path) -> None:
    _write_frame(hourly_frame(rows), path)


def write_daily_csv(rows: List[DayBucket], path: Path) -> None:
    _write_frame(daily_frame(rows), path)


def render_tables(hourly: List[HourBucket], daily: List[DayBucket]) -> str:
    """Both tables as aligned text for stdout."""
    fmt = {"kWh Value": lambda v: VALUE_FORMAT % v}
    hourly_df = hourly_frame(hourly)
    daily_df = daily_frame(daily)
    parts = [
        "Hourly Data:",
        hourly_df.to_string(index=False, formatters=fmt) if len(hourly_df) else "(empty)",
        "",
        "Daily Data:",
        daily_df.to_string(index=False, formatters=fmt) if len(daily_df) else "(empty)",
    ]
    return "\n".join(parts)
