# backend/portfolio_analytics/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

This package contains all Pydantic schemas organized by domain:
- analytics: Metrics, diversification, cash flows, XIRR, report, comparison
- assets: Asset snapshot input (with persistence aliases) and output
- errors: Error response formats
- prices: Live quotes and price refresh

Usage:
    from portfolio_analytics.schemas import AssetIn, MetricsResponse
    from portfolio_analytics.schemas import ReportRequest, ReportResponse
    from portfolio_analytics.schemas import PriceQuoteResponse
"""

from portfolio_analytics.schemas.analytics import (
    # Metrics
    AllocationSliceResponse,
    MetricsResponse,
    DiversificationResponse,
    # Cash flows / XIRR
    CashFlowsRequest,
    CashFlowSchema,
    CashFlowResponse,
    CashFlowsResponse,
    XirrRequest,
    XirrResponse,
    # Report
    ReportRequest,
    InsightResponse,
    ReportResponse,
    # Comparison
    SeriesPoint,
    ComparisonRequest,
    GrowthPointResponse,
    ComparisonResponse,
)
from portfolio_analytics.schemas.assets import (
    AssetIn,
    AssetOut,
    AssetSnapshotRequest,
)
from portfolio_analytics.schemas.errors import (
    ErrorDetail,
    ValidationErrorDetail,
)
from portfolio_analytics.schemas.prices import (
    PriceQuoteResponse,
    RefreshRequest,
    RefreshResponse,
)

__all__ = [
    # Analytics
    "AllocationSliceResponse",
    "MetricsResponse",
    "DiversificationResponse",
    "CashFlowsRequest",
    "CashFlowSchema",
    "CashFlowResponse",
    "CashFlowsResponse",
    "XirrRequest",
    "XirrResponse",
    "ReportRequest",
    "InsightResponse",
    "ReportResponse",
    "SeriesPoint",
    "ComparisonRequest",
    "GrowthPointResponse",
    "ComparisonResponse",
    # Assets
    "AssetIn",
    "AssetOut",
    "AssetSnapshotRequest",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Prices
    "PriceQuoteResponse",
    "RefreshRequest",
    "RefreshResponse",
]
