from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url

from .config import Settings, get_settings


logger = logging.getLogger(__name__)


def connect_args_for(url: str, busy_timeout_seconds: float) -> dict:
    """DBAPI connect args that cap how long a write waits on a held lock."""
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # sqlite3 busy-waits up to `timeout` seconds on a locked database
        # before raising "database is locked".
        return {
            "timeout": busy_timeout_seconds,
            "check_same_thread": False,
        }
    if backend == "postgresql":
        return {"options": f"-c lock_timeout={int(busy_timeout_seconds * 1000)}"}
    return {}


def build_engine(settings: Settings | None = None) -> Engine:
    """Create the store engine.

    The engine is returned to the caller and passed around explicitly; this
    module keeps no process-wide engine.
    """
    settings = settings or get_settings()
    url = settings.database_url

    connect_args = connect_args_for(url, settings.busy_timeout_seconds)

    logger.info(
        "[DB] Creating engine backend=%s busy_timeout=%.1fs",
        make_url(url).get_backend_name(),
        settings.busy_timeout_seconds,
    )

    engine = create_engine(url, pool_pre_ping=True, future=True, connect_args=connect_args)

    return engine


def check_connection(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("[DB] Connection test OK")
        return True
    except Exception:
        logger.exception("[DB] Connection test FAILED")
        return False
