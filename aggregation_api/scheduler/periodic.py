"""Periodic aggregation scheduler.

Runs one daemon thread per granularity. Each thread calls its cycle's tick
handler once at startup and then every `interval` seconds, measured from the
moment the scheduler started. With `align_to_boundaries` the wait is instead
stretched to the next window boundary, so each tick lands just after a window
closes and the cycle's previous-window pass captures its final sum.

The scheduler owns the write lock shared by both cycles.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from ..aggregation.windows import seconds_until_next_boundary
from ..core.domain.bucket import BucketKind, Granularity
from ..infrastructure.persistence.store import EnergyStore
from .cycle import AggregationCycle, Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HOURLY_INTERVAL = 3600.0
DEFAULT_DAILY_INTERVAL = 86400.0

# Margin after a boundary so the clock is safely inside the new window.
BOUNDARY_MARGIN_SECONDS = 1.0


class AggregationScheduler:
    """Owns the write lock and the hourly/daily cycles."""

    def __init__(
        self,
        store: EnergyStore,
        hourly_interval: float = DEFAULT_HOURLY_INTERVAL,
        daily_interval: float = DEFAULT_DAILY_INTERVAL,
        align_to_boundaries: bool = False,
        clock: Clock = utc_now,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        if hourly_interval <= 0 or daily_interval <= 0:
            raise ValueError("intervals must be positive")

        self._store = store
        self._clock = clock
        self._monotonic = monotonic
        self._align = align_to_boundaries
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

        self._intervals: Dict[BucketKind, float] = {
            BucketKind.HOURLY: float(hourly_interval),
            BucketKind.DAILY: float(daily_interval),
        }
        self.cycles: Dict[BucketKind, AggregationCycle] = {
            BucketKind.HOURLY: AggregationCycle(store, Granularity.HOUR, self._lock, clock),
            BucketKind.DAILY: AggregationCycle(store, Granularity.DAY, self._lock, clock),
        }

    @property
    def lock(self) -> threading.Lock:
        """Write lock; hold it around any store write."""
        return self._lock

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        """Start one background thread per cycle."""
        if self.running:
            return

        self._stop_event.clear()
        self._threads = [
            threading.Thread(
                target=self._run_loop,
                args=(cycle, self._intervals[kind]),
                name=f"aggregation-{kind.value}",
                daemon=True,
            )
            for kind, cycle in self.cycles.items()
        ]
        for t in self._threads:
            t.start()
        logger.info(
            "[Scheduler] Started hourly_interval=%.1fs daily_interval=%.1fs align=%s",
            self._intervals[BucketKind.HOURLY],
            self._intervals[BucketKind.DAILY],
            self._align,
        )

    def stop(self, timeout: float = 5.0) -> None:
        """End the loops after their current tick."""
        self._stop_event.set()
        for t in self._threads:
            t.join(timeout=timeout)
        self._threads = []
        logger.info("[Scheduler] Stopped")

    def run_once(self) -> Dict[BucketKind, Optional[float]]:
        """Tick every cycle once, in the calling thread."""
        return {kind: cycle.tick() for kind, cycle in self.cycles.items()}

    def stats(self) -> dict:
        return {
            "running": self.running,
            "cycles": {
                kind.value: {"state": cycle.state.value, **cycle.stats.to_dict()}
                for kind, cycle in self.cycles.items()
            },
        }

    # ------------------------------------------------------------------

    def _run_loop(self, cycle: AggregationCycle, interval: float) -> None:
        started = self._monotonic()
        tick_no = 0
        while not self._stop_event.is_set():
            try:
                cycle.tick()
            except Exception:
                # Store failures are handled inside tick; anything else must
                # not kill the thread either.
                logger.exception("[Scheduler] %s tick raised unexpectedly", cycle.name)

            tick_no = self._next_tick_no(tick_no, interval, started)
            delay = self._next_delay(cycle, interval, started, tick_no)
            if self._stop_event.wait(delay):
                break

    def _next_tick_no(self, tick_no: int, interval: float, started: float) -> int:
        # Slots missed during a stall longer than one interval are skipped,
        # not replayed: at most one late tick fires, then the cadence resumes.
        return max(tick_no + 1, int((self._monotonic() - started) // interval))

    def _next_delay(self, cycle: AggregationCycle, interval: float, started: float, tick_no: int) -> float:
        if self._align:
            return seconds_until_next_boundary(self._clock(), cycle.granularity) + BOUNDARY_MARGIN_SECONDS
        # Fixed cadence from start; a slow tick does not push later ticks back.
        due = started + tick_no * interval
        return max(0.0, due - self._monotonic())
