from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_env_file() -> str:
    # .env next to the repo root, shared by the API and the jobs.
    repo_root = Path(__file__).resolve().parents[1]
    return str(repo_root / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    busy_timeout_seconds: float

    hourly_interval_seconds: float
    daily_interval_seconds: float
    align_to_boundaries: bool
    scheduler_enabled: bool

    api_key: str | None
    log_level: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("AGG_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    database_url = os.getenv("DATABASE_URL", "sqlite:///energy_aggregates.db")

    # Ceiling for waiting on a locked database before a write is reported as failed.
    busy_timeout_seconds = float(os.getenv("STORE_BUSY_TIMEOUT_SECONDS", "5"))

    hourly_interval_seconds = float(os.getenv("AGG_HOURLY_INTERVAL_SECONDS", "3600"))
    daily_interval_seconds = float(os.getenv("AGG_DAILY_INTERVAL_SECONDS", "86400"))
    align_to_boundaries = _env_bool("AGG_ALIGN_TO_BOUNDARIES", "false")
    scheduler_enabled = _env_bool("AGG_SCHEDULER_ENABLED", "true")

    api_key = os.getenv("AGG_API_KEY") or None
    log_level = os.getenv("AGG_LOG_LEVEL", "INFO").upper()

    return Settings(
        database_url=database_url,
        busy_timeout_seconds=busy_timeout_seconds,
        hourly_interval_seconds=hourly_interval_seconds,
        daily_interval_seconds=daily_interval_seconds,
        align_to_boundaries=align_to_boundaries,
        scheduler_enabled=scheduler_enabled,
        api_key=api_key,
        log_level=log_level,
    )
