"""Bounded, chronological window of recent readings.

One buffer per monitored session.  Appending past capacity evicts the
oldest reading.  The buffer does no locking of its own; the owning
MonitoringSession serialises access.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator

from footguard.domain.reading import SensorReading

DEFAULT_HISTORY_SIZE = 30


class HistoryBuffer:
    """FIFO window of the last ``capacity`` readings."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._readings: deque[SensorReading] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._readings.maxlen or 0

    def push(self, reading: SensorReading) -> None:
        self._readings.append(reading)

    def snapshot(self) -> list[SensorReading]:
        """Copy of the contents, oldest first."""
        return list(self._readings)

    @property
    def latest(self) -> SensorReading | None:
        return self._readings[-1] if self._readings else None

    def clear(self) -> None:
        self._readings.clear()

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SensorReading]:
        return iter(self.snapshot())
