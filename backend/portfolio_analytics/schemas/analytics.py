# backend/portfolio_analytics/schemas/analytics.py
"""
Pydantic schemas for the Analytics API.

These schemas define the request/response formats for:
- Portfolio metrics and allocation
- Diversification score
- Cash-flow series and XIRR
- Full report (metrics + XIRR + insights + recommendations)
- Portfolio vs benchmark growth comparison

Design decisions:
- All numeric values are serialized as STRINGS to preserve Decimal precision
- Percentages are in percent form (4.38 = 4.38%), unlike ratios
- Degenerate input (empty snapshot, one cash flow) returns zeros, not errors
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from portfolio_analytics.schemas.assets import AssetSnapshotRequest
from portfolio_analytics.services.constants import (
    BENCHMARK_PERIOD,
    BENCHMARK_SYMBOL,
    HISTORY_PERIODS,
    MAX_CASH_FLOWS_PER_REQUEST,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_TOLERANCE,
)


# =============================================================================
# METRICS SCHEMAS
# =============================================================================

class AllocationSliceResponse(BaseModel):
    """Current value and share of one holdings category."""

    category: str = Field(..., description="Asset category")
    value: str = Field(..., description="Sum of price × quantity")
    percent: str = Field(..., description="Share of total assets in percent")


class MetricsResponse(BaseModel):
    """
    Portfolio metrics response.

    All numeric values are strings to preserve precision.
    """

    total_value: str = Field(..., description="Current value of holdings (liabilities excluded)")
    total_invested: str = Field(..., description="Holdings cost minus liability principal")
    total_gain: str = Field(..., description="net_worth - total_invested")
    total_gain_percentage: str = Field(..., description="total_gain / |total_invested| × 100")
    diversification_score: str = Field(..., description="0-100, higher = more diversified")
    liabilities: str = Field(..., description="Current value of liabilities")
    net_worth: str = Field(..., description="total_value - liabilities")
    total_passive_income: str = Field(..., description="Annual interest + dividends")
    average_yield: str = Field(..., description="total_passive_income / total_value × 100")
    allocation_by_type: dict[str, str] = Field(
        default_factory=dict,
        description="Category -> current value (holdings only)"
    )
    allocation: list[AllocationSliceResponse] = Field(
        default_factory=list,
        description="Allocation slices, largest first"
    )


class DiversificationResponse(BaseModel):
    """Diversification score response."""

    score: str = Field(..., description="0 (one category) to 100 (evenly spread)")


# =============================================================================
# CASH FLOW / XIRR SCHEMAS
# =============================================================================

class CashFlowsRequest(AssetSnapshotRequest):
    """Asset snapshot plus the cash-flow construction options."""

    as_of: date | None = Field(
        default=None,
        description="Valuation date of the terminal flow (default: today)"
    )
    net_liabilities: bool = Field(
        default=False,
        description="Treat liability principal as an inflow and use net worth "
                    "as the terminal value"
    )


class CashFlowSchema(BaseModel):
    """A dated signed amount. Negative = invested, positive = returned."""

    date: date
    amount: Decimal


class CashFlowResponse(BaseModel):
    date: date
    amount: str


class CashFlowsResponse(BaseModel):
    cash_flows: list[CashFlowResponse]


class XirrRequest(BaseModel):
    """Cash flows and solver settings for an XIRR calculation."""

    cash_flows: list[CashFlowSchema] = Field(
        ...,
        max_length=MAX_CASH_FLOWS_PER_REQUEST,
        description="Dated flows in any order"
    )
    initial_guess: float = Field(
        default=XIRR_INITIAL_GUESS,
        gt=-1,
        description="Starting rate as a decimal (0.10 = 10%)"
    )
    max_iterations: int = Field(
        default=XIRR_MAX_ITERATIONS,
        ge=1,
        le=1000,
        description="Newton-Raphson iteration cap"
    )
    tolerance: float = Field(
        default=XIRR_TOLERANCE,
        gt=0,
        description="Convergence threshold on the change in rate"
    )


class XirrResponse(BaseModel):
    """XIRR as a percentage string ("10.5" = 10.5% per year)."""

    xirr: str


# =============================================================================
# REPORT SCHEMAS
# =============================================================================

class ReportRequest(CashFlowsRequest):
    """Same body as the cash-flow request."""


class InsightResponse(BaseModel):
    level: Literal["success", "warning", "info"]
    text: str


class ReportResponse(BaseModel):
    """Full analytics report for an asset snapshot."""

    as_of: date
    metrics: MetricsResponse
    xirr: str = Field(..., description="Annualized money-weighted return in percent")
    cash_flows: list[CashFlowResponse]
    insights: list[InsightResponse]
    recommendations: list[str]


# =============================================================================
# COMPARISON SCHEMAS
# =============================================================================

class SeriesPoint(BaseModel):
    date: date
    value: Decimal


class ComparisonRequest(BaseModel):
    """
    Net worth history and benchmark prices, both ascending by date.

    When `benchmark` is omitted, daily closes of `benchmark_symbol` over
    `benchmark_period` are fetched from Yahoo Finance.
    """

    history: list[SeriesPoint] = Field(
        ...,
        max_length=MAX_CASH_FLOWS_PER_REQUEST,
        description="Portfolio net worth observations"
    )
    benchmark: list[SeriesPoint] | None = Field(
        default=None,
        max_length=MAX_CASH_FLOWS_PER_REQUEST,
        description="Benchmark prices; fetched live when omitted"
    )
    benchmark_symbol: str = Field(
        default=BENCHMARK_SYMBOL,
        min_length=1,
        max_length=20,
        description="Yahoo symbol of the live benchmark"
    )
    benchmark_period: str = Field(
        default=BENCHMARK_PERIOD,
        examples=list(HISTORY_PERIODS),
        description="Lookback period of the live benchmark"
    )

    @field_validator('benchmark_period')
    @classmethod
    def validate_period(cls, v: str) -> str:
        if v not in HISTORY_PERIODS:
            raise ValueError(f"benchmark_period must be one of {', '.join(HISTORY_PERIODS)}")
        return v


class GrowthPointResponse(BaseModel):
    date: date
    portfolio: str = Field(..., description="Cumulative portfolio growth in percent")
    benchmark: str = Field(..., description="Cumulative benchmark growth in percent")


class ComparisonResponse(BaseModel):
    points: list[GrowthPointResponse]
