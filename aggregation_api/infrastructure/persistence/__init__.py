"""Persistence infrastructure for readings and aggregated buckets."""

from .schema import ensure_schema
from .store import EnergyStore

__all__ = [
    "ensure_schema",
    "EnergyStore",
]
