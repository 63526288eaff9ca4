"""Batch aggregation orchestrator: load, parse, aggregate, write."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from aggregation_api.aggregation.batch import BatchAggregates, aggregate_readings
from aggregation_api.core.validation.record_parser import parse_records

from .config import BatchConfig
from .loader import load_records
from .report import render_tables, write_daily_csv, write_hourly_csv

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    total_records: int
    accepted: int
    rejected: int
    hourly_rows: int
    daily_rows: int
    aggregates: BatchAggregates


def run_once(cfg: BatchConfig) -> BatchSummary:
    """Run the whole batch. InputError aborts the run; bad records do not."""
    t0 = time.monotonic()

    records = load_records(cfg.input_path)
    outcome = parse_records(records)
    aggregates = aggregate_readings(outcome.readings)

    hourly = aggregates.hourly_rows()
    daily = aggregates.daily_rows()

    if cfg.print_tables:
        print(render_tables(hourly, daily))

    write_hourly_csv(hourly, cfg.hourly_path)
    write_daily_csv(daily, cfg.daily_path)

    logger.info(
        "batch_run ms=%.1f records=%d accepted=%d rejected=%d hourly=%d daily=%d",
        (time.monotonic() - t0) * 1000,
        len(records),
        outcome.accepted_count,
        outcome.rejected_count,
        len(hourly),
        len(daily),
    )
    return BatchSummary(
        total_records=len(records),
        accepted=outcome.accepted_count,
        rejected=outcome.rejected_count,
        hourly_rows=len(hourly),
        daily_rows=len(daily),
        aggregates=aggregates,
    )
