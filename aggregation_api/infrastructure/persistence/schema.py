"""Store schema setup.

Creates the readings and bucket tables if they don't exist. Safe to call on
every startup.
"""

from __future__ import annotations

import logging
import pathlib

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from common.errors import SchemaError

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = pathlib.Path(__file__).parent / "migrations"
SCHEMA_FILE = MIGRATIONS_DIR / "001_energy_tables.sql"

READINGS_TABLE = "energy_readings"
HOURLY_TABLE = "energy_hourly"
DAILY_TABLE = "energy_daily"


def _split_statements(sql_content: str) -> list[str]:
    return [s.strip() for s in sql_content.split(";") if s.strip()]


def ensure_schema(engine: Engine) -> None:
    """Ensure the three store tables exist.

    Args:
        engine: Store engine

    Raises:
        SchemaError: migration file missing or table creation failed
    """
    logger.info("[Schema] Ensuring schema exists")

    if not SCHEMA_FILE.exists():
        raise SchemaError(f"Migration file not found: {SCHEMA_FILE}")

    statements = _split_statements(SCHEMA_FILE.read_text())

    try:
        with engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))
    except SQLAlchemyError as e:
        logger.exception("[Schema] Schema creation failed: %s", e)
        raise SchemaError(f"Cannot create store tables: {e}") from e

    logger.info("[Schema] Schema ready (%d statements)", len(statements))
