"""Fixed-window per-client rate limiter (powered by limits).

Windows start at a key's first request, not at clock boundaries, and are
kept in a ``limits`` async storage backend: one counter per client key that
expires when its window ends. The in-process MemoryStorage is the default;
any other ``limits.aio.storage`` backend can be passed in.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import TypeAlias

from limits import RateLimitItemPerSecond
from limits.aio.storage import MemoryStorage, Storage
from limits.aio.strategies import FixedWindowRateLimiter as FixedWindowStrategy

logger = logging.getLogger(__name__)

RATE_LIMIT_NAMESPACE = "generate"


@dataclass(slots=True, frozen=True)
class Admitted:
    """Request may proceed."""

    remaining: int


@dataclass(slots=True, frozen=True)
class Rejected:
    """Request exceeds the quota for the current window."""

    retry_after_seconds: int


AdmissionDecision: TypeAlias = Admitted | Rejected


class FixedWindowRateLimiter:
    """Counts requests per client key in fixed windows and rejects overflow.

    Example
    -------
    >>> limiter = FixedWindowRateLimiter(max_requests=15, window_seconds=60)
    >>> decision = await limiter.admit("203.0.113.7")
    """

    __slots__ = ("max_requests", "window_seconds", "_item", "_storage", "_strategy")

    def __init__(
        self,
        max_requests: int = 15,
        window_seconds: int = 60,
        storage: Storage | None = None,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._storage = storage or MemoryStorage()
        self._strategy = FixedWindowStrategy(self._storage)
        self._item = RateLimitItemPerSecond(
            max_requests, window_seconds, namespace=RATE_LIMIT_NAMESPACE
        )

    async def admit(self, client_key: str) -> AdmissionDecision:
        """Charge one request to *client_key* or reject it.

        The storage increments the counter atomically, so concurrent calls
        for one key never admit more than ``max_requests`` per window.
        """
        admitted = await self._strategy.hit(self._item, client_key)
        stats = await self._strategy.get_window_stats(self._item, client_key)
        if admitted:
            return Admitted(remaining=stats.remaining)

        retry_after = max(1, math.ceil(stats.reset_time - time.time()))
        logger.warning(
            "rate_limit_rejected: key=%s, limit=%d/%ds, retry_after=%ds",
            client_key,
            self.max_requests,
            self.window_seconds,
            retry_after,
        )
        return Rejected(retry_after_seconds=retry_after)


__all__ = [
    "AdmissionDecision",
    "Admitted",
    "FixedWindowRateLimiter",
    "RATE_LIMIT_NAMESPACE",
    "Rejected",
]
