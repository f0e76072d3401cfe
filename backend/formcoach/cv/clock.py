"""Time sources for phase and hold timers."""

import logging
import time
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Anything with a monotonic now() in seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Wall-clock time for live sessions."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """
    Clock advanced explicitly by the caller.

    Used by tests and by offline replay, where frame timestamps (not the
    wall clock) define elapsed time.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: float):
        if timestamp < self._now:
            raise ValueError("ManualClock cannot move backwards")
        self._now = float(timestamp)


class FrameClock:
    """
    Time taken from frame timestamps (seconds).

    Until a timestamped frame arrives, now() reads the fallback clock. Once
    one has, now() is the latest timestamp, so holds and tempo follow the
    capture time of the frames rather than their arrival time.
    """

    def __init__(self, fallback: Optional[Clock] = None):
        self.fallback = fallback or SystemClock()
        self._latest: Optional[float] = None

    def now(self) -> float:
        if self._latest is None:
            return self.fallback.now()
        return self._latest

    def observe(self, timestamp: Optional[float]):
        if timestamp is None:
            return
        if self._latest is not None and timestamp < self._latest:
            logger.warning(f"Ignoring frame timestamp {timestamp} older than {self._latest}")
            return
        self._latest = float(timestamp)
