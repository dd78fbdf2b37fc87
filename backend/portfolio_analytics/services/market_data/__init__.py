# backend/portfolio_analytics/services/market_data/__init__.py
"""
Market data services package.

This package contains:
- Abstract interface for price providers (base.py)
- Yahoo Finance implementation (yahoo.py)
- CoinGecko implementation (coingecko.py)
- Quote cache (cache.py)
- Provider dispatch and asset price refresh (price_service.py)

Usage:
    from portfolio_analytics.services.market_data import (
        CoinGeckoPriceProvider,
        InMemoryPriceCache,
        PriceService,
        YahooPriceProvider,
    )

    service = PriceService(
        stock_provider=YahooPriceProvider(),
        crypto_provider=CoinGeckoPriceProvider(),
        cache=InMemoryPriceCache(),
    )
    quote = service.get_price("crypto", "BTC")

Architecture:
    PriceProvider (ABC)
    ├── YahooPriceProvider (stocks, futures)
    └── CoinGeckoPriceProvider (crypto)

    PriceService
    └── Dispatches by category
    └── Caches quotes through PriceCache
"""

from portfolio_analytics.services.market_data.base import (
    PriceProvider,
    PriceQuote,
)
from portfolio_analytics.services.market_data.cache import (
    InMemoryPriceCache,
    PriceCache,
)
from portfolio_analytics.services.market_data.coingecko import CoinGeckoPriceProvider
from portfolio_analytics.services.market_data.price_service import (
    PriceService,
    resolve_coin_id,
)
from portfolio_analytics.services.market_data.yahoo import YahooPriceProvider

__all__ = [
    # Interface and data classes
    "PriceProvider",
    "PriceQuote",

    # Cache
    "PriceCache",
    "InMemoryPriceCache",

    # Implementations
    "YahooPriceProvider",
    "CoinGeckoPriceProvider",

    # Service
    "PriceService",
    "resolve_coin_id",
]
