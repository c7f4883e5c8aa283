"""Bounded event feed for mimic activity (stats, reveals, spawns, deaths)."""

from __future__ import annotations

import threading
from collections import Counter, deque
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True, slots=True)
class SimEvent:
    """One entry of the API event feed."""

    tick: int
    category: str
    message: str
    entity_ids: tuple[int, ...] = ()
    metadata: dict[str, Any] | None = None


class EventLog:
    """Oldest events fall off once *capacity* is reached.

    Behavior steps produce events on worker threads but the loop hands them
    over in one batch per tick; API readers always get a copied list.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, capacity: int = 5000) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, event: SimEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: Iterable[SimEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_tick(self, tick: int, categories: Iterable[str] | None = None) -> list[SimEvent]:
        """Events with tick >= *tick*, optionally only the given categories."""
        wanted = set(categories) if categories else None
        with self._lock:
            return [
                e for e in self._buffer
                if e.tick >= tick and (wanted is None or e.category in wanted)
            ]

    def latest(self, count: int = 50) -> list[SimEvent]:
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def counts(self) -> dict[str, int]:
        """Number of retained events per category."""
        with self._lock:
            return dict(Counter(e.category for e in self._buffer))

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
