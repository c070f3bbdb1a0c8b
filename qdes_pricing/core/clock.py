"""Clock implementations."""

import time

from qdes_pricing.core.interfaces import Clock


class SystemClock(Clock):
    """Wall-clock seconds from the host."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute second (may move backwards)."""
        if timestamp < 0:
            raise ValueError(f"timestamp must be >= 0, got {timestamp}")
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        """Move forward by seconds and return the new time."""
        if seconds < 0:
            raise ValueError(f"seconds must be >= 0, got {seconds}")
        self._now += seconds
        return self._now
