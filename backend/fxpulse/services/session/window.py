"""
Bar Window

Append-only sliding window of bars with FIFO eviction.
"""

from collections import deque
from typing import Iterable, Optional

from fxpulse.schemas.market import Bar
from fxpulse.services.base import BarOrderError, ConfigurationError


class BarWindow:
    """
    Bounded, time-ordered sequence of bars.

    Usage:
        window = BarWindow(capacity=100)
        evicted = window.append(bar)
        recent = window.tail(50)
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ConfigurationError("BarWindow", f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._bars: deque[Bar] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def latest(self) -> Optional[Bar]:
        return self._bars[-1] if self._bars else None

    def __len__(self) -> int:
        return len(self._bars)

    def append(self, bar: Bar) -> Optional[Bar]:
        """
        Append a bar, returning the evicted oldest bar if capacity was exceeded.

        Raises:
            BarOrderError: If bar.time does not exceed the newest bar's time
        """
        latest = self.latest
        if latest is not None and bar.time <= latest.time:
            raise BarOrderError(
                "BarWindow",
                f"bar time {bar.time} is not after newest bar time {latest.time}",
            )

        evicted = self._bars[0] if len(self._bars) == self._capacity else None
        self._bars.append(bar)
        return evicted

    def replace(self, bars: Iterable[Bar]) -> None:
        """Drop everything and load `bars`, keeping the newest `capacity`."""
        self._bars.clear()
        for bar in bars:
            self.append(bar)

    def bars(self) -> list[Bar]:
        """Snapshot of the window, oldest first."""
        return list(self._bars)

    def tail(self, count: int) -> list[Bar]:
        """The newest `count` bars, oldest first."""
        if count <= 0:
            return []
        return list(self._bars)[-count:]
