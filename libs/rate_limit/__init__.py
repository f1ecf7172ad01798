"""Per-client admission control for the secret service."""

from libs.rate_limit.fixed_window import (
    GLOBAL_IDENTITY,
    RateBucket,
    RateLimiter,
    rate_limit_checks_total,
)

__all__ = [
    "GLOBAL_IDENTITY",
    "RateBucket",
    "RateLimiter",
    "rate_limit_checks_total",
]
