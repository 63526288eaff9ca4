"""Import a JSON document of readings into the store.

Existing timestamps are overwritten (last write wins). Records with a bad
timestamp are skipped and counted.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from aggregation_api.core.validation.record_parser import parse_records
from aggregation_api.infrastructure.persistence import EnergyStore, ensure_schema
from common.config import get_settings
from common.db import build_engine
from common.errors import InputError, SchemaError, StoreError
from jobs.batch.loader import load_records

logger = logging.getLogger(__name__)


def import_file(store: EnergyStore, path: Path) -> tuple[int, int]:
    """Upsert every valid record of `path`.

    Returns:
        (inserted, rejected)
    """
    outcome = parse_records(load_records(path))
    inserted = store.upsert_raw_readings(outcome.readings)
    logger.info("[Import] %s inserted=%d rejected=%d", path, inserted, outcome.rejected_count)
    return inserted, outcome.rejected_count


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description="Import energy readings into the store")
    p.add_argument("input", nargs="?", default="data.json")
    args = p.parse_args(argv)

    engine = build_engine(settings)
    try:
        ensure_schema(engine)
        import_file(EnergyStore(engine), Path(args.input))
    except (InputError, SchemaError, StoreError) as e:
        logger.error("Import aborted: %s", e)
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
