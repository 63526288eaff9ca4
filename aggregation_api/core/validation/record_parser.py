"""Conversion of raw input records into domain readings."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from common.errors import TimestampParseError

from ..domain.reading import Reading
from .timestamp_parser import parse_timestamp

logger = logging.getLogger(__name__)

# Field names of the input document. "value" is accepted as a fallback.
TIMESTAMP_FIELD = "timestamp"
VALUE_FIELD = "kWh_value"


@dataclass
class RejectedRecord:
    index: int
    record: Any
    reason: str


@dataclass
class ParseOutcome:
    """Readings in input order plus the records that were skipped."""
    readings: List[Reading] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.readings)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)


def _coerce_value(raw: Any) -> Optional[float]:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


def parse_record(record: Mapping[str, Any]) -> Reading:
    """Build a Reading from one `{timestamp, kWh_value}` mapping.

    Raises:
        TimestampParseError: bad timestamp
        ValueError: missing or non-numeric value
    """
    if not isinstance(record, Mapping):
        raise ValueError("record is not an object")

    timestamp = parse_timestamp(record.get(TIMESTAMP_FIELD))

    raw_value = record.get(VALUE_FIELD, record.get("value"))
    value = _coerce_value(raw_value)
    if value is None:
        raise ValueError(f"invalid value: {raw_value!r}")

    return Reading(timestamp=timestamp, value=value)


def parse_records(records: Iterable[Mapping[str, Any]]) -> ParseOutcome:
    """Parse a batch of records, skipping the ones that cannot be used.

    A bad record never aborts the batch: it is logged and reported in
    `ParseOutcome.rejected`, and the remaining records are still parsed.
    """
    outcome = ParseOutcome()
    for idx, record in enumerate(records):
        try:
            outcome.readings.append(parse_record(record))
        except TimestampParseError as e:
            logger.warning("[Parser] Skipping record %d: timestamp parse error: %s", idx, e)
            outcome.rejected.append(RejectedRecord(index=idx, record=record, reason=str(e)))
        except ValueError as e:
            logger.warning("[Parser] Skipping record %d: %s", idx, e)
            outcome.rejected.append(RejectedRecord(index=idx, record=record, reason=str(e)))

    if outcome.rejected:
        logger.info(
            "[Parser] Parsed records accepted=%d rejected=%d",
            outcome.accepted_count,
            outcome.rejected_count,
        )
    return outcome
