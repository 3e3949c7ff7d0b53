"""
Clock implementations

Instants are integer nanoseconds since the Unix epoch.
"""

import time


class SystemClock:
    """Wall clock with nanosecond resolution"""

    def now_ns(self) -> int:
        return time.time_ns()


class FixedClock:
    """Clock that only moves when told to"""

    def __init__(self, now_ns: int = 0):
        self._now = now_ns

    def now_ns(self) -> int:
        return self._now

    def set(self, now_ns: int) -> None:
        self._now = now_ns

    def advance(self, nanos: int) -> None:
        self._now += nanos


__all__ = ["SystemClock", "FixedClock"]
