"""RFC3339 timestamp parsing.

Only one profile is accepted: full date, `T`, full time with optional
fraction, and a mandatory offset (`Z` or `+HH:MM` / `-HH:MM`). The result is
always converted to UTC, the fixed zone used for bucketing.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from common.errors import TimestampParseError

FIXED_ZONE = timezone.utc

_RFC3339 = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def _parse_offset(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return timezone.utc
    sign = -1 if raw[0] == "-" else 1
    hours, minutes = int(raw[1:3]), int(raw[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError("offset out of range")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_timestamp(raw: object) -> datetime:
    """Parse an RFC3339 timestamp into an aware UTC datetime.

    Args:
        raw: Timestamp string, e.g. "2024-01-01T05:30:00Z"

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        TimestampParseError: raw is not a string in the accepted profile
    """
    if not isinstance(raw, str):
        raise TimestampParseError(raw, "timestamp is not a string")

    match = _RFC3339.match(raw)
    if match is None:
        raise TimestampParseError(raw)

    parts = match.groupdict()
    # Sub-microsecond digits are dropped, datetime has no room for them.
    fraction = (parts["fraction"] or "").ljust(6, "0")[:6]

    try:
        tz = _parse_offset(parts["offset"])
        parsed = datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"]),
            int(parts["minute"]),
            int(parts["second"]),
            int(fraction),
            tzinfo=tz,
        )
    except ValueError as e:
        raise TimestampParseError(raw, f"timestamp out of range ({e})") from e

    return parsed.astimezone(FIXED_ZONE)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime coming back from the store.

    Naive values are taken as UTC (SQLite drops the offset on round trip).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=FIXED_ZONE)
    return value.astimezone(FIXED_ZONE)
