"""Batch aggregation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

HOURLY_FILENAME = "hourly_data.csv"
DAILY_FILENAME = "daily_data.csv"


@dataclass(frozen=True)
class BatchConfig:
    """Batch CLI configuration."""
    input_path: Path
    output_dir: Path
    print_tables: bool = False

    @property
    def hourly_path(self) -> Path:
        return self.output_dir / HOURLY_FILENAME

    @property
    def daily_path(self) -> Path:
        return self.output_dir / DAILY_FILENAME
