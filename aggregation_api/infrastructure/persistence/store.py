"""Energy store - raw readings and aggregated buckets.

All timestamps are written as naive UTC values so the same statements work on
SQLite and PostgreSQL. Values read back are normalized to aware UTC.

The store does not lock anything itself: callers that write (the aggregation
cycles and the ingest endpoints) hold the scheduler's write lock around the
call. Reads are unsynchronized.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, List, Optional

from sqlalchemy import DateTime, Float, bindparam, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from common.errors import StoreError

from ...core.domain.bucket import BucketKind, StoredBucket, Window
from ...core.domain.reading import Reading
from ...core.validation.timestamp_parser import ensure_utc
from .schema import DAILY_TABLE, HOURLY_TABLE, READINGS_TABLE

logger = logging.getLogger(__name__)

BUCKET_TABLES = {
    BucketKind.HOURLY: HOURLY_TABLE,
    BucketKind.DAILY: DAILY_TABLE,
}

_UPSERT_READING = text(
    f"""
    INSERT INTO {READINGS_TABLE} (ts, value)
    VALUES (:ts, :value)
    ON CONFLICT (ts) DO UPDATE SET value = excluded.value
    """
).bindparams(bindparam("ts", type_=DateTime()), bindparam("value", type_=Float()))

_SUM_WINDOW = text(
    f"""
    SELECT COALESCE(SUM(value), 0.0)
    FROM {READINGS_TABLE}
    WHERE ts >= :start AND ts < :end
    """
).bindparams(bindparam("start", type_=DateTime()), bindparam("end", type_=DateTime()))

_LIST_READINGS = text(
    f"SELECT ts, value FROM {READINGS_TABLE} ORDER BY ts"
).columns(ts=DateTime, value=Float)

_COUNT_READINGS = text(f"SELECT COUNT(*) FROM {READINGS_TABLE}")


def _upsert_bucket_stmt(kind: BucketKind):
    table = BUCKET_TABLES[kind]
    return text(
        f"""
        INSERT INTO {table} (bucket_start, value, computed_at)
        VALUES (:bucket_start, :value, :computed_at)
        ON CONFLICT (bucket_start) DO UPDATE SET
            value = excluded.value,
            computed_at = excluded.computed_at
        """
    ).bindparams(
        bindparam("bucket_start", type_=DateTime()),
        bindparam("value", type_=Float()),
        bindparam("computed_at", type_=DateTime()),
    )


def _list_buckets_stmt(kind: BucketKind):
    table = BUCKET_TABLES[kind]
    return text(
        f"SELECT bucket_start, value FROM {table} ORDER BY bucket_start"
    ).columns(bucket_start=DateTime, value=Float)


def _to_db(instant: datetime) -> datetime:
    return ensure_utc(instant).replace(tzinfo=None)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EnergyStore:
    """Durable keyed tables for readings and buckets.

    Every public method runs in its own transaction and wraps driver errors
    (including lock contention past the busy timeout) in StoreError.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Connection]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error("[Store] %s failed: %s", operation, e)
            raise StoreError(f"{operation} failed: {e}") from e

    # ------------------------------------------------------------------
    # Raw readings
    # ------------------------------------------------------------------

    def upsert_raw_reading(self, timestamp: datetime, value: float) -> None:
        """Insert or overwrite the reading keyed by `timestamp`."""
        with self._transaction("upsert_raw_reading") as conn:
            conn.execute(_UPSERT_READING, {"ts": _to_db(timestamp), "value": float(value)})

    def upsert_raw_readings(self, readings: Iterable[Reading]) -> int:
        """Bulk variant of upsert_raw_reading.

        Rows are applied in input order, so a timestamp repeated within the
        same batch keeps its last value.
        """
        rows = [{"ts": _to_db(r.timestamp), "value": float(r.value)} for r in readings]
        if not rows:
            return 0
        with self._transaction("upsert_raw_readings") as conn:
            for row in rows:
                conn.execute(_UPSERT_READING, row)
        logger.debug("[Store] Upserted %d raw readings", len(rows))
        return len(rows)

    def sum_readings_in_window(self, start: datetime, end: datetime) -> float:
        """Sum of reading values with start <= ts < end. 0.0 when none match."""
        with self._transaction("sum_readings_in_window") as conn:
            return self._sum_window(conn, start, end)

    def list_readings(self) -> List[Reading]:
        with self._transaction("list_readings") as conn:
            rows = conn.execute(_LIST_READINGS).fetchall()
        return [Reading(timestamp=ensure_utc(r.ts), value=float(r.value)) for r in rows]

    def count_readings(self) -> int:
        with self._transaction("count_readings") as conn:
            return int(conn.execute(_COUNT_READINGS).scalar_one())

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    def upsert_bucket(self, kind: BucketKind, key: datetime, value: float) -> None:
        """Insert or overwrite the bucket row keyed by its window start."""
        with self._transaction("upsert_bucket") as conn:
            self._upsert_bucket(conn, kind, key, value)

    def list_buckets(self, kind: BucketKind) -> List[StoredBucket]:
        """All buckets of one kind, ordered by window start."""
        with self._transaction("list_buckets") as conn:
            rows = conn.execute(_list_buckets_stmt(kind)).fetchall()
        return [
            StoredBucket(kind=kind, bucket_start=ensure_utc(r.bucket_start), value=float(r.value))
            for r in rows
        ]

    def aggregate_window(
        self,
        kind: BucketKind,
        window: Window,
        on_computed: Optional[Callable[[float], None]] = None,
    ) -> float:
        """Recompute one bucket: sum the window and upsert, atomically.

        Args:
            kind: Bucket table to write
            window: Window whose readings are summed; its start is the bucket key
            on_computed: Called with the sum before the upsert runs

        Returns:
            The value written for the bucket
        """
        with self._transaction(f"aggregate_window[{kind.value}]") as conn:
            total = self._sum_window(conn, window.start, window.end)
            if on_computed is not None:
                on_computed(total)
            self._upsert_bucket(conn, kind, window.start, total)
        return total

    # ------------------------------------------------------------------

    @staticmethod
    def _sum_window(conn: Connection, start: datetime, end: datetime) -> float:
        total = conn.execute(_SUM_WINDOW, {"start": _to_db(start), "end": _to_db(end)}).scalar_one()
        return float(total or 0.0)

    @staticmethod
    def _upsert_bucket(conn: Connection, kind: BucketKind, key: datetime, value: float) -> None:
        conn.execute(
            _upsert_bucket_stmt(kind),
            {
                "bucket_start": _to_db(key),
                "value": float(value),
                "computed_at": _to_db(_utc_now()),
            },
        )
