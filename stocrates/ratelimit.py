from __future__ import annotations

import logging
import time
from typing import Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class SystemClock:
    """Wall-clock time source. Tests substitute a fake with the same two methods."""

    def now(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class MinIntervalLimiter:
    """Enforces a minimum spacing between requests that share a key.

    Each key behaves like a leaky bucket of capacity one: ``acquire`` blocks
    (through the clock) until ``min_interval`` seconds have passed since the
    previous acquire for the same key.
    """

    def __init__(self, min_interval: float, clock: Optional[SystemClock] = None) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self.clock = clock or SystemClock()
        self._last: Dict[Hashable, float] = {}

    def acquire(self, key: Hashable) -> float:
        waited = 0.0
        last = self._last.get(key)
        if last is not None:
            elapsed = self.clock.now() - last
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                logger.debug("Waiting %.3fs before next request to %s", waited, key)
                self.clock.sleep(waited)
        self._last[key] = self.clock.now()
        return waited

    def last_acquired(self, key: Hashable) -> Optional[float]:
        return self._last.get(key)

    def reset(self) -> None:
        self._last.clear()
