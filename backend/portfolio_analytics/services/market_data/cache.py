# backend/portfolio_analytics/services/market_data/cache.py
"""
Quote cache used by PriceService.

PriceCache is a Protocol so a shared backend (Redis, memcached) can replace
the in-process cache without touching PriceService. The cache is injected
into PriceService; the analytics engine never sees it.

Cache key format: "{provider}:{symbol}" (e.g. "yahoo:GC=F", "coingecko:bitcoin")
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Protocol

from portfolio_analytics.services.market_data.base import PriceQuote

logger = logging.getLogger(__name__)


class PriceCache(Protocol):
    """Interface required by PriceService."""

    def get(self, key: str) -> PriceQuote | None:
        ...

    def set(self, key: str, value: PriceQuote, ttl: float) -> None:
        ...


class InMemoryPriceCache:
    """
    Thread-safe in-process quote cache with per-entry TTL.

    Expired entries are evicted when they are read. Hits are returned with
    source="cache" so callers can tell a cached quote from a live one.

    Thread Safety:
        Uses threading.Lock for safe concurrent access in single-worker mode.
        With multiple workers each process keeps its own cache.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._entries: dict[str, tuple[float, PriceQuote]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> PriceQuote | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            expires_at, quote = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"Cache expired for {key}")
                return None

        logger.debug(f"Cache hit for {key}")
        return quote.as_cached()

    def set(self, key: str, value: PriceQuote, ttl: float) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)
        logger.debug(f"Cached {key} for {ttl}s")

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Cleared {count} cache entries")

    def size(self) -> int:
        """Return current number of cached entries (expired ones included)."""
        with self._lock:
            return len(self._entries)
