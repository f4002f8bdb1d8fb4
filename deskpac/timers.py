"""Deferred callbacks run against the simulation clock."""

from __future__ import annotations
import heapq
import itertools
import logging
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class TimerQueue:
    """
    Fire-and-forget tasks keyed by an absolute simulation time.

    The world polls the queue once per frame; nothing runs between polls, so
    a callback never overlaps a frame update. Tasks cannot be cancelled,
    `clear` drops everything still pending.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def __len__(self):
        return len(self._heap)

    def schedule(self, at: float, callback: Callable[[], None]):
        heapq.heappush(self._heap, (at, next(self._counter), callback))

    def next_due(self):
        return self._heap[0][0] if self._heap else None

    def poll(self, now: float) -> int:
        """Run every task due at or before `now`, earliest first."""
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, callback = heapq.heappop(self._heap)
            fired += 1
            try:
                callback()
            except Exception:
                logger.exception("Deferred task failed")
        return fired

    def clear(self):
        self._heap.clear()
