"""Validation layer - input records and timestamps."""

from .timestamp_parser import FIXED_ZONE, ensure_utc, parse_timestamp
from .record_parser import ParseOutcome, RejectedRecord, parse_record, parse_records

__all__ = [
    "FIXED_ZONE",
    "ensure_utc",
    "parse_timestamp",
    "ParseOutcome",
    "RejectedRecord",
    "parse_record",
    "parse_records",
]
