"""Per-client sliding window rate limiter for the /chat endpoint.

Each key (client address) may make at most max_requests requests within any
window_seconds interval. Unlike an outbound limiter this one never waits:
excess requests are rejected immediately with a retry hint.
"""

import threading
import time
from collections import deque
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MAX_REQUESTS = 30
DEFAULT_TIME_WINDOW_SECONDS = 60
MAX_TRACKED_KEYS = 10_000  # stale keys are purged past this size


class SlidingWindowRateLimiter:
    """Sliding window request quota keyed by client address."""

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        time_window: float = DEFAULT_TIME_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the rate limiter.

        Args:
            max_requests: Maximum number of requests allowed per key in the time window.
            time_window: The time window in seconds.
            clock: Monotonic time source (seconds).
        """
        if max_requests < 1:
            raise ValueError("max_requests must be positive")
        if time_window <= 0:
            raise ValueError("time_window must be positive")

        self.max_requests = max_requests
        self.time_window = time_window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        logger.info("Rate limiter initialized", max_requests=max_requests, time_window=time_window)

    def _cleanup(self, key: str, now: float) -> deque[float]:
        """Drop timestamps older than the window for one key."""
        timestamps = self._hits.setdefault(key, deque())
        while timestamps and now - timestamps[0] >= self.time_window:
            timestamps.popleft()
        return timestamps

    def _purge_stale(self, now: float) -> None:
        """Forget keys whose newest request is outside the window."""
        stale = [k for k, ts in self._hits.items() if not ts or now - ts[-1] >= self.time_window]
        for k in stale:
            del self._hits[k]

    def hit(self, key: str) -> tuple[bool, float]:
        """Record a request for key if the quota allows it.

        Returns:
            (allowed, retry_after_seconds). retry_after is 0.0 when allowed.
        """
        with self._lock:
            now = self._clock()
            if len(self._hits) >= MAX_TRACKED_KEYS:
                self._purge_stale(now)
            timestamps = self._cleanup(key, now)
            if len(timestamps) < self.max_requests:
                timestamps.append(now)
                return True, 0.0
            retry_after = max(0.0, timestamps[0] + self.time_window - now)
            return False, retry_after
