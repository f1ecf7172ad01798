"""
Injectable time sources for the secret store and rate limiter.

Secrets are stamped with wall-clock UTC timestamps (``now``) while rate-limit
windows are measured on a monotonic clock (``monotonic``) so that wall-clock
adjustments never shorten or extend a window.

Tests substitute a manually advanced clock to make TTL and window behaviour
deterministic.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Time source consumed by stores and limiters."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        ...

    def monotonic(self) -> float:
        """Return seconds from an arbitrary, never-decreasing origin."""
        ...


class SystemClock:
    """Clock backed by the operating system."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()

    def __repr__(self) -> str:
        return "SystemClock()"


SYSTEM_CLOCK = SystemClock()
