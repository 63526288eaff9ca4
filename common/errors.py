"""Error taxonomy shared by the API and the jobs.

- TimestampParseError: one record is unusable; skip it and keep going.
- InputError: input/output file cannot be read, decoded or written; abort the run.
- StoreError: a store transaction failed; abort only the current cycle attempt.
- SchemaError: required tables cannot be created; fatal at startup.
"""

from __future__ import annotations


class AggregationError(Exception):
    """Base class for errors raised by this project."""


class TimestampParseError(AggregationError, ValueError):
    def __init__(self, raw: object, reason: str = "not an RFC3339 timestamp") -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw!r}")


class InputError(AggregationError):
    pass


class StoreError(AggregationError):
    pass


class SchemaError(AggregationError):
    pass
