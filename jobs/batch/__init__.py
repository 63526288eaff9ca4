"""Batch aggregation package - JSON document in, two CSV files out.

Modules:
- config: BatchConfig dataclass
- loader: JSON input loading
- report: CSV writers (one per bucket kind) and console tables
- runner: Orchestrator (run_once)
- cli: CLI entry point (main)
"""

from .config import BatchConfig
from .runner import BatchSummary, run_once
from .cli import main

__all__ = ["BatchConfig", "BatchSummary", "run_once", "main"]
