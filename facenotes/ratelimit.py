# facenotes/ratelimit.py
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple


class RateLimiter:
    """
    Sliding-window request counter keyed by client address.
    ``max_requests <= 0`` disables limiting.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    @property
    def enabled(self) -> bool:
        return self.max_requests > 0

    def hit(self, key: str) -> Tuple[bool, float]:
        """
        Record a request for ``key``.
        Returns (allowed, retry_after_seconds); retry_after is 0 when allowed.
        """
        if not self.enabled:
            return True, 0.0
        now = self._clock()
        with self._lock:
            # forget idle clients at most once per window
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._expire(hits, now)
            if len(hits) >= self.max_requests:
                return False, max(self.window_seconds - (now - hits[0]), 0.0)
            hits.append(now)
            return True, 0.0

    def _expire(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        for key in list(self._hits):
            self._expire(self._hits[key], now)
            if not self._hits[key]:
                del self._hits[key]
        self._last_sweep = now

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
