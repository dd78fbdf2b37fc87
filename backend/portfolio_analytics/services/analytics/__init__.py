# backend/portfolio_analytics/services/analytics/__init__.py
"""
Analytics Service Package.

This package provides the portfolio analytics engine:
- Portfolio metrics (net worth, gain, allocation, passive income)
- Diversification score (Herfindahl-Hirschman based)
- Money-weighted return (XIRR) from a cash-flow series
- Insights, recommendations and benchmark growth comparison

Architecture:
    analytics/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Asset, CashFlow, result dataclasses
    ├── metrics.py               # Totals, allocation, diversification, income
    ├── returns.py               # Cash-flow construction and XIRR
    ├── insights.py              # Insights and recommendations
    ├── benchmark.py             # Portfolio vs benchmark growth
    └── service.py               # AnalyticsService (orchestrator)

Usage:
    from portfolio_analytics.services.analytics import (
        Asset,
        AssetCategory,
        AnalyticsService,
    )

    assets = [
        Asset(id="1", category=AssetCategory.STOCKS, quantity=Decimal("50"),
              purchase_price=Decimal("150"), current_price=Decimal("178.5")),
    ]
    report = AnalyticsService().build_report(assets)
"""

from portfolio_analytics.services.analytics.benchmark import compare_growth
from portfolio_analytics.services.analytics.insights import (
    generate_insights,
    generate_recommendations,
)
from portfolio_analytics.services.analytics.metrics import (
    YIELD_RULES,
    calculate_allocation,
    calculate_allocation_by_type,
    calculate_asset_income,
    calculate_diversification_score,
    calculate_hhi,
    calculate_passive_income,
    compute_metrics,
    partition_assets,
)
from portfolio_analytics.services.analytics.returns import (
    build_cash_flows,
    calculate_portfolio_xirr,
    calculate_xirr,
)
from portfolio_analytics.services.analytics.service import AnalyticsService
from portfolio_analytics.services.analytics.types import (
    AllocationSlice,
    Asset,
    AssetCategory,
    CashFlow,
    GrowthPoint,
    Insight,
    PortfolioMetrics,
    PortfolioReport,
)

__all__ = [
    # Main service
    "AnalyticsService",

    # Input types
    "Asset",
    "AssetCategory",
    "CashFlow",

    # Result types
    "AllocationSlice",
    "PortfolioMetrics",
    "PortfolioReport",
    "Insight",
    "GrowthPoint",

    # Individual functions (for testing)
    "YIELD_RULES",
    "partition_assets",
    "calculate_allocation",
    "calculate_allocation_by_type",
    "calculate_hhi",
    "calculate_diversification_score",
    "calculate_asset_income",
    "calculate_passive_income",
    "compute_metrics",
    "build_cash_flows",
    "calculate_xirr",
    "calculate_portfolio_xirr",
    "generate_insights",
    "generate_recommendations",
    "compare_growth",
]
