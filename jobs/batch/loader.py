"""Input document loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from common.errors import InputError

logger = logging.getLogger(__name__)


def load_records(path: Path) -> List[Any]:
    """Read the JSON array of `{timestamp, kWh_value}` records.

    Raises:
        InputError: file missing/unreadable, not JSON, or not an array
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as e:
        raise InputError(f"Cannot open input file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"Cannot decode JSON in {path}: {e}") from e

    if not isinstance(data, list):
        raise InputError(f"Expected a JSON array in {path}, got {type(data).__name__}")

    logger.info("[Loader] Loaded %d records from %s", len(data), path)
    return data
