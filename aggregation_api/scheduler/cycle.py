"""One periodic aggregation cycle (hourly or daily).

Each tick recomputes the bucket of the window that contains "now":

    IDLE -> COMPUTING -> UPSERTING -> IDLE

A failed tick is logged and abandoned; the cycle simply waits for the next
tick. There is no retry inside a tick.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from common.errors import StoreError

from ..aggregation.windows import previous_window, window_for
from ..core.domain.bucket import Granularity, Window
from ..infrastructure.persistence.store import EnergyStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CycleState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"
    UPSERTING = "upserting"


@dataclass
class CycleStats:
    ticks: int = 0
    succeeded: int = 0
    failed: int = 0
    finalized_previous: int = 0
    last_window_start: Optional[datetime] = None
    last_value: Optional[float] = None
    last_error: Optional[str] = None
    last_tick_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "ticks": self.ticks,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "finalized_previous": self.finalized_previous,
            "last_window_start": self.last_window_start.isoformat() if self.last_window_start else None,
            "last_value": self.last_value,
            "last_error": self.last_error,
            "last_tick_at": self.last_tick_at.isoformat() if self.last_tick_at else None,
        }


class AggregationCycle:
    """Tick handler for one granularity.

    The write lock is shared with the other cycle (and the ingest path) and is
    held for the whole read-sum-then-upsert transaction.
    """

    def __init__(
        self,
        store: EnergyStore,
        granularity: Granularity,
        lock: threading.Lock,
        clock: Clock = utc_now,
        finalize_previous: bool = True,
    ):
        self._store = store
        self._granularity = granularity
        self._lock = lock
        self._clock = clock
        self._finalize_previous = finalize_previous

        self._state = CycleState.IDLE
        self._last_window: Optional[Window] = None
        self.stats = CycleStats()

    @property
    def granularity(self) -> Granularity:
        return self._granularity

    @property
    def name(self) -> str:
        return self._granularity.kind.value

    @property
    def state(self) -> CycleState:
        return self._state

    def tick(self) -> Optional[float]:
        """Run one aggregation pass for the current window.

        Returns:
            The bucket value written, or None if the attempt failed
        """
        now = self._clock()
        window = window_for(now, self._granularity)
        self.stats.ticks += 1
        self.stats.last_tick_at = now

        try:
            with self._lock:
                stale = self._window_to_finalize(window)
                if stale is not None:
                    closed_value = self._aggregate(stale)
                    self.stats.finalized_previous += 1
                    logger.info(
                        "[Scheduler] %s window closed start=%s value=%.4f",
                        self.name, stale.start.isoformat(), closed_value,
                    )
                value = self._aggregate(window)
        except StoreError as e:
            self.stats.failed += 1
            self.stats.last_error = str(e)
            logger.error(
                "[Scheduler] %s tick abandoned window_start=%s err=%s",
                self.name, window.start.isoformat(), e,
            )
            return None
        finally:
            self._state = CycleState.IDLE

        self._last_window = window
        self.stats.succeeded += 1
        self.stats.last_window_start = window.start
        self.stats.last_value = value
        self.stats.last_error = None
        logger.info(
            "[Scheduler] %s bucket upserted start=%s value=%.4f",
            self.name, window.start.isoformat(), value,
        )
        return value

    def _window_to_finalize(self, current: Window) -> Optional[Window]:
        """The window that closed since the last successful tick, if any.

        Only the immediately preceding window is recomputed, once. Older
        windows that were never observed are not backfilled.
        """
        if not self._finalize_previous or self._last_window is None:
            return None
        prev = previous_window(current, self._granularity)
        if self._last_window == prev:
            return prev
        return None

    def _aggregate(self, window: Window) -> float:
        self._state = CycleState.COMPUTING
        return self._store.aggregate_window(
            self._granularity.kind,
            window,
            on_computed=self._mark_upserting,
        )

    def _mark_upserting(self, _total: float) -> None:
        self._state = CycleState.UPSERTING
