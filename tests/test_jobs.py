"""Tests for the import job and the standalone aggregation runner."""

import json

import pytest

from aggregation_api.core.domain import BucketKind
from aggregation_api.infrastructure.persistence import EnergyStore
from common.config import get_settings
from common.db import build_engine
from jobs import aggregation_runner, import_readings

from conftest import utc


@pytest.fixture
def env_db(tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path / 'jobs.db'}"
    monkeypatch.setenv("AGG_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setenv("DATABASE_URL", db_url)
    engine = build_engine(get_settings())
    yield EnergyStore(engine)
    engine.dispose()


class TestImportReadings:

    def test_import_then_reimport_overwrites(self, tmp_path, env_db, sample_records):
        path = tmp_path / "data.json"
        path.write_text(json.dumps(sample_records))
        assert import_readings.main([str(path)]) == 0

        path.write_text(json.dumps([{"timestamp": "2024-01-01T05:00:00Z", "kWh_value": 1.0}]))
        assert import_readings.main([str(path)]) == 0

        assert [(r.timestamp, r.value) for r in env_db.list_readings()] == [
            (utc(2024, 1, 1, 5), 1.0),
            (utc(2024, 1, 1, 5, 30), 5.0),
            (utc(2024, 1, 1, 23), 2.0),
        ]

    def test_missing_file_returns_error(self, tmp_path, env_db):
        assert import_readings.main([str(tmp_path / "nope.json")]) == 1


class TestAggregationRunner:

    def test_once_writes_current_buckets(self, env_db):
        assert aggregation_runner.main(["--once"]) == 0
        assert len(env_db.list_buckets(BucketKind.HOURLY)) == 1
        assert len(env_db.list_buckets(BucketKind.DAILY)) == 1
