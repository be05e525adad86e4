"""Time sources for the simulation.

Agents never read the system clock directly; they receive a ``Clock`` so
tests can drive time explicitly with ``ManualClock``.
"""

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """A monotonic source of time in seconds."""

    def now(self) -> float:
        ...

    def elapsed_seconds(self, since: float) -> float:
        ...


class MonotonicClock:
    """Wall-clock time backed by ``time.monotonic``."""

    def now(self) -> float:
        return time.monotonic()

    def elapsed_seconds(self, since: float) -> float:
        return time.monotonic() - since


class ManualClock:
    """A clock that only moves when told to.

    Used by tests and by headless runs that simulate faster than real time.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def elapsed_seconds(self, since: float) -> float:
        return self._now - since

    def advance(self, seconds: float) -> float:
        """Move time forward and return the new reading."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds
        return self._now
