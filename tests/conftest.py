"""Shared fixtures: a file-backed SQLite store per test."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from aggregation_api.infrastructure.persistence import EnergyStore, ensure_schema
from common.config import Settings
from common.db import build_engine


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite://",
        busy_timeout_seconds=5.0,
        hourly_interval_seconds=3600.0,
        daily_interval_seconds=86400.0,
        align_to_boundaries=False,
        scheduler_enabled=False,
        api_key=None,
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for tick handlers."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(database_url=f"sqlite:///{tmp_path / 'energy.db'}")


@pytest.fixture
def engine(settings):
    eng = build_engine(settings)
    ensure_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> EnergyStore:
    return EnergyStore(engine)


@pytest.fixture
def sample_records() -> list[dict]:
    """The three-reading scenario: 15.00 at 05:00, 2.00 at 23:00, 17.00 for the day."""
    return [
        {"timestamp": "2024-01-01T05:00:00Z", "kWh_value": 10.0},
        {"timestamp": "2024-01-01T05:30:00Z", "kWh_value": 5.0},
        {"timestamp": "2024-01-01T23:00:00Z", "kWh_value": 2.0},
    ]
