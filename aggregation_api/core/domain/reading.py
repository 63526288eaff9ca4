"""Domain model for energy readings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Reading:
    """Energy reading - canonical domain model.

    `timestamp` is always timezone-aware and expressed in UTC. A reading is
    never mutated; re-importing the same timestamp replaces the stored value.
    """
    timestamp: datetime
    value: float

    def to_row(self) -> dict:
        """Parameters for the raw readings upsert."""
        return {"ts": self.timestamp, "value": float(self.value)}
