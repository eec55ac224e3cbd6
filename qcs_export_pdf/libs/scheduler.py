"""
Tick Scheduler

Keeps export cycles on a fixed cadence measured from program start.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Fixed-interval tick source.

    Tick targets are always ``baseline + k * interval``. Ticks that pass while
    a cycle is still running are skipped, never queued.
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        """
        Initialize scheduler

        Args:
            interval: Seconds between ticks
            clock: Returns the current time in seconds, on the same clock
                threading.Event.wait measures its timeouts with
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.clock = clock
        self.baseline: Optional[float] = None
        self._next: Optional[float] = None

    def next_tick(self) -> float:
        """
        Target time of the next tick, called at the start of a cycle.

        The first call fixes the baseline at the current time and returns
        one interval later. Later calls return the first tick strictly after
        the current time.
        """
        now = self.clock()
        if self._next is None:
            self.baseline = now
            self._next = now + self.interval
        else:
            self._skip_to(now, inclusive=True)
        return self._next

    def seconds_until_tick(self) -> float:
        """
        Seconds to wait before the next cycle, called after a cycle finishes.

        If the cycle overran one or more ticks they are skipped and the wait
        runs to the first tick at or after the current time.
        """
        if self._next is None:
            return 0.0
        now = self.clock()
        skipped = self._skip_to(now, inclusive=False)
        if skipped:
            logger.warning(f"Cycle overran the schedule, skipped {skipped} tick(s)")
        return max(0.0, self._next - now)

    def _skip_to(self, now: float, inclusive: bool) -> int:
        skipped = 0
        while self._next < now or (inclusive and self._next == now):
            self._next += self.interval
            skipped += 1
        return skipped
