"""Core helpers for the Content Generator Service."""

from content_generator.core.config import Settings, settings
from content_generator.core.rate_limit import (
    Admitted,
    FixedWindowRateLimiter,
    Rejected,
)
from content_generator.core.resilience import RetryController, RetryPolicy

__all__ = [
    "Admitted",
    "FixedWindowRateLimiter",
    "Rejected",
    "RetryController",
    "RetryPolicy",
    "Settings",
    "settings",
]
