"""Bounded, time-windowed store of phrase observations."""

from __future__ import annotations

import logging
import threading
from collections import deque
from datetime import datetime, timedelta

from ..core.models import Observation

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


class FrequencyStore:
    """Insertion-ordered observations with two independent evictions.

    - capacity: inserting past ``capacity`` drops the oldest entry (FIFO);
    - age: ``sweep_older_than`` drops entries older than the horizon.

    All access goes through one lock; readers take a snapshot and work on
    the copy so sorting never happens under the lock.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._observations: deque[Observation] = deque(maxlen=capacity)

    def insert(self, phrase: str, timestamp: datetime) -> None:
        with self._lock:
            self._observations.append(Observation(phrase, timestamp))

    def sweep_older_than(self, now: datetime, horizon: timedelta) -> int:
        """Remove observations whose age is strictly greater than ``horizon``."""
        with self._lock:
            before = len(self._observations)
            kept = [o for o in self._observations if now - o.observed_at <= horizon]
            self._observations = deque(kept, maxlen=self.capacity)
            removed = before - len(kept)
        if removed:
            logger.info("Swept %d observations older than %s", removed, horizon)
        return removed

    def snapshot(self) -> tuple[Observation, ...]:
        with self._lock:
            return tuple(self._observations)

    def clear(self) -> None:
        with self._lock:
            self._observations.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observations)
