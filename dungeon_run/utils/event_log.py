"""Thread-safe ring buffer for run events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RunEvent:
    """A single room-level event for the API event feed."""

    tick: int
    category: str
    message: str
    room_index: int = -1
    entity_ids: tuple[int, ...] = ()


class EventLog:
    """Bounded event log.  Writers append; readers snapshot a slice.

    Thread-safe via a simple lock: the loop thread writes, API handlers read.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, capacity: int = 2000) -> None:
        self._buffer: deque[RunEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: RunEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since_tick(self, tick: int) -> list[RunEvent]:
        """Return all retained events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[RunEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def by_category(self, category: str) -> list[RunEvent]:
        with self._lock:
            return [e for e in self._buffer if e.category == category]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
