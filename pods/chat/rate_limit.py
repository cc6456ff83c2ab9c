"""In-memory sliding-window rate limiter keyed by client address."""

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional


class SlidingWindowRateLimiter:
    """Allow at most ``limit`` hits per key in any rolling ``window`` seconds.

    Rejected hits are not recorded, so a client that keeps retrying is let
    back in as soon as its oldest accepted hit expires. Keys with no live
    hits are swept at most once per window, so the table only holds keys
    seen in roughly the last two windows.
    """

    def __init__(self, limit: int = 20, window: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if limit <= 0 or window <= 0:
            raise ValueError("limit and window must be positive")
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep: Optional[float] = None

    def _expire(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window:
            hits.popleft()

    def _sweep_locked(self, now: float) -> int:
        stale = []
        for key, hits in self._hits.items():
            self._expire(hits, now)
            if not hits:
                stale.append(key)
        for key in stale:
            del self._hits[key]
        self._last_sweep = now
        return len(stale)

    def is_limited(self, key: str, now: Optional[float] = None) -> bool:
        """Record a hit for ``key`` and return True if it must be rejected."""
        now = self._clock() if now is None else now
        with self._lock:
            if self._last_sweep is None:
                self._last_sweep = now
            elif now - self._last_sweep >= self.window:
                self._sweep_locked(now)
            hits = self._hits.setdefault(key, deque())
            self._expire(hits, now)
            if len(hits) >= self.limit:
                return True
            hits.append(now)
            return False

    def remaining(self, key: str, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        with self._lock:
            hits = self._hits.get(key)
            if hits is None:
                return self.limit
            self._expire(hits, now)
            if not hits:
                del self._hits[key]
                return self.limit
            return max(0, self.limit - len(hits))

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop keys with no live hits. Returns how many were removed."""
        now = self._clock() if now is None else now
        with self._lock:
            return self._sweep_locked(now)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = None

    def size(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._hits)


__all__ = ["SlidingWindowRateLimiter"]
