"""Standalone periodic aggregation (hourly + daily cycles, no HTTP layer)."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

from aggregation_api.infrastructure.persistence import EnergyStore, ensure_schema
from aggregation_api.scheduler.periodic import AggregationScheduler
from common.config import get_settings
from common.db import build_engine
from common.errors import SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunnerConfig:
    hourly_interval: float
    daily_interval: float
    align_to_boundaries: bool
    once: bool


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description="Periodic hourly/daily energy aggregation")
    p.add_argument("--hourly-interval", type=float, default=settings.hourly_interval_seconds)
    p.add_argument("--daily-interval", type=float, default=settings.daily_interval_seconds)
    p.add_argument("--align", action="store_true", default=settings.align_to_boundaries,
                   help="tick right after each window boundary")
    p.add_argument("--once", action="store_true", help="run a single tick per cycle and exit")
    args = p.parse_args(argv)

    cfg = RunnerConfig(
        hourly_interval=args.hourly_interval,
        daily_interval=args.daily_interval,
        align_to_boundaries=bool(args.align),
        once=bool(args.once),
    )

    engine = build_engine(settings)
    try:
        ensure_schema(engine)
    except SchemaError as e:
        logger.error("Cannot start aggregation: %s", e)
        return 1

    scheduler = AggregationScheduler(
        EnergyStore(engine),
        hourly_interval=cfg.hourly_interval,
        daily_interval=cfg.daily_interval,
        align_to_boundaries=cfg.align_to_boundaries,
    )

    if cfg.once:
        results = scheduler.run_once()
        failed = [kind.value for kind, value in results.items() if value is None]
        if failed:
            logger.error("Aggregation failed for: %s", ", ".join(failed))
            return 1
        return 0

    logger.info("Aggregation runner started")
    scheduler.start()
    try:
        while scheduler.running:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping scheduler")
    finally:
        scheduler.stop()
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
