# reunion/utils/ratelimit.py
# Fixed-window request counter, keyed by client identifier.
# Call sites only see RateLimitStore.check_and_increment(), so a shared store
# (Redis, memcached) can replace the in-memory one when running more than one instance.

from __future__ import annotations
from dataclasses import dataclass
import threading
from typing import Dict, Protocol


class RateLimitStore(Protocol):
    def check_and_increment(self, identifier: str, now: float) -> bool:
        """Count one call for `identifier` at time `now`; False if over quota."""
        ...


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimitStore:
    """
    Process-local store. No eviction; state is lost on restart and is not
    shared between workers.
    """
    def __init__(self, limit: int = 100, window_seconds: float = 60.0) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()  # sync routes run in a threadpool

    def check_and_increment(self, identifier: str, now: float) -> bool:
        with self._lock:
            w = self._windows.get(identifier)
            if w is None or now >= w.reset_at:
                self._windows[identifier] = _Window(count=1, reset_at=now + self.window_seconds)
                return True
            if w.count >= self.limit:
                return False
            w.count += 1
            return True

    def count_for(self, identifier: str) -> int:
        with self._lock:
            w = self._windows.get(identifier)
            return w.count if w else 0
