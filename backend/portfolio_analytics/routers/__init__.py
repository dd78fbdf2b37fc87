# backend/portfolio_analytics/routers/__init__.py
"""
API routers.

- analytics: Metrics, diversification, cash flows, XIRR, report, comparison
- prices: Live quotes and asset price refresh
"""

from portfolio_analytics.routers.analytics import router as analytics_router
from portfolio_analytics.routers.prices import router as prices_router

__all__ = [
    "analytics_router",
    "prices_router",
]
