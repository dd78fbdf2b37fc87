# backend/portfolio_analytics/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. This is more efficient than creating new instances per request
and ensures shared state (the quote cache) works correctly.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from portfolio_analytics.dependencies import get_analytics_service

    @router.post("/metrics")
    def get_metrics(
        service: AnalyticsService = Depends(get_analytics_service),
    ):
        ...

Tests replace these through `app.dependency_overrides`.
"""

import logging
from functools import lru_cache

from portfolio_analytics.config import settings
from portfolio_analytics.services.analytics.service import AnalyticsService
from portfolio_analytics.services.market_data.cache import InMemoryPriceCache
from portfolio_analytics.services.market_data.coingecko import CoinGeckoPriceProvider
from portfolio_analytics.services.market_data.price_service import PriceService
from portfolio_analytics.services.market_data.yahoo import YahooPriceProvider

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Using @lru_cache ensures the function returns the same instance on every call
#
# Order matters: define dependencies before dependents
# 1. get_price_cache, get_stock_price_provider, get_crypto_price_provider (no deps)
# 2. get_price_service (depends on the three above)
# 3. get_analytics_service (no deps, stateless)


@lru_cache(maxsize=1)
def get_price_cache() -> InMemoryPriceCache:
    """Get the singleton quote cache shared by every price lookup."""
    logger.debug("Initializing singleton InMemoryPriceCache")
    return InMemoryPriceCache()


@lru_cache(maxsize=1)
def get_stock_price_provider() -> YahooPriceProvider:
    """Get the singleton Yahoo Finance provider (stocks, metals, commodities)."""
    logger.debug("Initializing singleton YahooPriceProvider")
    return YahooPriceProvider(timeout=settings.price_provider_timeout_seconds)


@lru_cache(maxsize=1)
def get_crypto_price_provider() -> CoinGeckoPriceProvider:
    """Get the singleton CoinGecko provider (one shared HTTP connection pool)."""
    logger.debug("Initializing singleton CoinGeckoPriceProvider")
    return CoinGeckoPriceProvider(
        base_url=settings.coingecko_base_url,
        vs_currency=settings.coingecko_vs_currency,
        timeout=settings.price_provider_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_price_service() -> PriceService:
    """Get the singleton PriceService instance."""
    logger.debug("Initializing singleton PriceService")
    return PriceService(
        stock_provider=get_stock_price_provider(),
        crypto_provider=get_crypto_price_provider(),
        cache=get_price_cache(),
        ttl_seconds=settings.price_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_analytics_service() -> AnalyticsService:
    """Get the singleton AnalyticsService instance (stateless)."""
    logger.debug("Initializing singleton AnalyticsService")
    return AnalyticsService()


def close_price_providers() -> None:
    """Close provider connections created so far (called on shutdown)."""
    if get_crypto_price_provider.cache_info().currsize:
        get_crypto_price_provider().close()
    if get_stock_price_provider.cache_info().currsize:
        get_stock_price_provider().close()
