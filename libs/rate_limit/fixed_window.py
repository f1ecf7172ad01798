"""In-process fixed-window rate limiter keyed by client identity."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from prometheus_client import Counter

from libs.core.common.clock import SYSTEM_CLOCK, Clock

logger = logging.getLogger(__name__)

rate_limit_checks_total = Counter(
    "secret_rate_limit_checks_total", "Total rate limit checks", ["result"]
)

# Identity used when the client address is unknown
GLOBAL_IDENTITY = "global"


@dataclass
class RateBucket:
    """Request count for one identity within its current window."""

    window_start: float
    count: int = 0


class RateLimiter:
    """
    Fixed-window counter per identity.

    Each identity gets ``max_requests_per_window`` requests per window. The
    count hard-resets once more than ``window_seconds`` have passed since the
    window opened, so a client can burst up to twice the limit around a
    window boundary. This is a first line of defence, not a security
    guarantee, and it is not shared across server instances.

    All buckets sit behind one lock; the critical section is O(1) and does
    no I/O.

    Example:
        >>> limiter = RateLimiter(max_requests_per_window=3, window_seconds=60)
        >>> [limiter.check("10.0.0.1") for _ in range(4)]
        [True, True, True, False]
    """

    def __init__(
        self,
        max_requests_per_window: int,
        window_seconds: float,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        if max_requests_per_window < 1:
            raise ValueError("max_requests_per_window must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests_per_window = max_requests_per_window
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: dict[str, RateBucket] = {}
        self._lock = threading.Lock()

    def check(self, identity: str) -> bool:
        """Count one request for ``identity`` and return whether it is allowed."""
        with self._lock:
            now = self._clock.monotonic()
            bucket = self._buckets.get(identity)
            if bucket is None:
                bucket = self._buckets[identity] = RateBucket(window_start=now)

            if now - bucket.window_start > self.window_seconds:
                bucket.window_start = now
                bucket.count = 0

            allowed = bucket.count < self.max_requests_per_window
            if allowed:
                bucket.count += 1

        rate_limit_checks_total.labels(result="allowed" if allowed else "blocked").inc()
        if not allowed:
            logger.warning("rate limit exceeded", extra={"client": identity})
        return allowed

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)
