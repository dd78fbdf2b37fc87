# backend/portfolio_analytics/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Are easily testable via dependency injection

Usage:
    from portfolio_analytics.services import AnalyticsService
    from portfolio_analytics.services import PriceService
    from portfolio_analytics.services import (
        ValidationError,
        MarketDataError,
    )

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Business constants and limits
    ├── analytics/                   # Analytics engine
    │   ├── types.py                 # Asset, CashFlow, result types
    │   ├── metrics.py               # Net worth, allocation, income
    │   ├── returns.py               # Cash flows and XIRR
    │   ├── insights.py              # Insights and recommendations
    │   ├── benchmark.py             # Growth comparison
    │   └── service.py               # Analytics orchestrator
    └── market_data/                 # Live prices
        ├── base.py                  # Abstract provider interface
        ├── yahoo.py                 # Yahoo Finance implementation
        ├── coingecko.py             # CoinGecko implementation
        ├── cache.py                 # Quote cache
        └── price_service.py         # Category dispatch and refresh
"""

from portfolio_analytics.services.exceptions import (
    ServiceError,
    ValidationError,
    UnsupportedCategoryError,
    MarketDataError,
    ProviderUnavailableError,
    SymbolNotFoundError,
    RateLimitError,
)
from portfolio_analytics.services.analytics import AnalyticsService
from portfolio_analytics.services.market_data import PriceService

__all__ = [
    # Services
    "AnalyticsService",
    "PriceService",

    # Exceptions
    "ServiceError",
    "ValidationError",
    "UnsupportedCategoryError",
    "MarketDataError",
    "ProviderUnavailableError",
    "SymbolNotFoundError",
    "RateLimitError",
]
