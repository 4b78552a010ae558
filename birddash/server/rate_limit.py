"""
rate_limit.py
-------------
In-memory sliding-window rate limiting keyed by client address.
"""

import threading
import time
from collections import defaultdict, deque

from fastapi import HTTPException, Request

from birddash.core.debug.debug_logger import DebugLogger


class RateLimiter:
    """Allows ``max_requests`` per ``window_ms`` for each key."""

    def __init__(self, window_ms: int, max_requests: int, message="Too many requests, please try again later"):
        self.window_ms = window_ms
        self.max_requests = max_requests
        self.message = message
        self._hits = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_sweep = None

    def is_allowed(self, key: str, now=None) -> bool:
        """
        Record a hit for ``key`` if it fits in the window.

        Args:
            key: Client identifier (usually the remote address)
            now: Current time in ms (defaults to the wall clock)

        Returns:
            bool: False when the request must be rejected
        """
        if now is None:
            now = time.time() * 1000.0
        with self._lock:
            self._sweep(now)
            hits = self._hits[key]
            while hits and hits[0] <= now - self.window_ms:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str, now=None) -> int:
        """Seconds until the oldest hit for ``key`` leaves the window."""
        if now is None:
            now = time.time() * 1000.0
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0
            return max(1, int((hits[0] + self.window_ms - now) / 1000.0 + 0.999))

    def _sweep(self, now):
        """Forget clients whose hits have all left the window, once per window."""
        if self._last_sweep is not None and now - self._last_sweep < self.window_ms:
            return
        self._last_sweep = now
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= now - self.window_ms]
        for key in expired:
            del self._hits[key]

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    def reset(self):
        with self._lock:
            self._hits.clear()
            self._last_sweep = None


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def check_limit(limiter: RateLimiter, request: Request):
    """
    Raises:
        HTTPException: 429 with a Retry-After header when over the limit
    """
    key = client_key(request)
    if limiter.is_allowed(key):
        return
    retry_after = limiter.retry_after(key)
    DebugLogger.warn(f"Rate limit hit by {key} on {request.url.path}", category="security")
    raise HTTPException(
        status_code=429,
        detail={"error": limiter.message, "retry_after": retry_after},
        headers={"Retry-After": str(retry_after)},
    )
