"""CLI entry point for the batch aggregation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from common.errors import InputError

from .config import BatchConfig
from .runner import run_once

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Aggregate energy readings into hourly and daily CSV files")
    p.add_argument("--input", default="data.json", help="JSON array of {timestamp, kWh_value}")
    p.add_argument("--output-dir", default="output_data")
    p.add_argument("--print", dest="print_tables", action="store_true", help="also print both tables")
    p.add_argument("--log-level", default="INFO")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    cfg = BatchConfig(
        input_path=Path(args.input),
        output_dir=Path(args.output_dir),
        print_tables=bool(args.print_tables),
    )

    try:
        run_once(cfg)
    except InputError as e:
        logger.error("Batch aborted: %s", e)
        return 1

    print("Data saved successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
