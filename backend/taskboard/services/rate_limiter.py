"""In-memory fixed-window rate limiter.

Counters live in the process, so each worker limits on its own. A shared
backend (Redis) would be needed to limit across instances.
"""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_in: int  # seconds until the window resets


class RateLimiter:
    """Thread-safe fixed-window counter keyed by an arbitrary string."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def check(self, key: str, max_attempts: int, window_seconds: int) -> RateLimitResult:
        """Count one attempt for ``key`` and report whether it is allowed."""
        with self._lock:
            now = self._clock()
            self._cleanup_expired(now)

            entry = self._store.get(key)
            if entry is None or entry.reset_at <= now:
                self._store[key] = RateLimitEntry(count=1, reset_at=now + window_seconds)
                return RateLimitResult(True, max_attempts - 1, window_seconds)

            entry.count += 1
            reset_in = math.ceil(entry.reset_at - now)
            if entry.count > max_attempts:
                return RateLimitResult(False, 0, reset_in)
            return RateLimitResult(True, max_attempts - entry.count, reset_in)

    def reset(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def _cleanup_expired(self, now: float) -> None:
        """Remove expired windows (called under lock)."""
        expired = [k for k, v in self._store.items() if v.reset_at <= now]
        for k in expired:
            del self._store[k]


# Singleton instance
rate_limiter = RateLimiter()
