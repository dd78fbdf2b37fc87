# backend/portfolio_analytics/routers/analytics.py
"""
Portfolio analytics endpoints.

Every endpoint computes over the asset snapshot posted in the request body;
nothing is stored between requests:
- POST /analytics/metrics          - Net worth, gain, allocation, passive income
- POST /analytics/diversification  - Diversification score only
- POST /analytics/cash-flows       - Cash-flow series used for XIRR
- POST /analytics/xirr             - XIRR of an explicit cash-flow series
- POST /analytics/report           - Metrics + XIRR + insights + recommendations
- POST /analytics/comparison       - Portfolio vs benchmark (SPY by default) cumulative growth

Asset records that contradict themselves (unknown category, liability flag
vs category) are rejected with 400 by the ValidationError handler in main.py.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Request

from portfolio_analytics.dependencies import get_analytics_service, get_price_service
from portfolio_analytics.middleware.rate_limit import limiter, RATE_LIMIT_ANALYTICS
from portfolio_analytics.schemas.analytics import (
    AllocationSliceResponse,
    CashFlowResponse,
    CashFlowsRequest,
    CashFlowsResponse,
    ComparisonRequest,
    ComparisonResponse,
    DiversificationResponse,
    GrowthPointResponse,
    InsightResponse,
    MetricsResponse,
    ReportRequest,
    ReportResponse,
    XirrRequest,
    XirrResponse,
)
from portfolio_analytics.schemas.assets import AssetSnapshotRequest
from portfolio_analytics.services.analytics import (
    AnalyticsService,
    CashFlow,
    PortfolioMetrics,
    calculate_xirr,
)
from portfolio_analytics.services.market_data import PriceService

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _decimal_to_str(value: Decimal) -> str:
    """Convert Decimal to string for JSON response, preserving precision."""
    if isinstance(value, int):
        value = Decimal(value)
    # normalize() drops trailing zeros, "f" keeps plain notation (100, not 1E+2)
    return format(value.normalize(), "f")


def _map_metrics(metrics: PortfolioMetrics) -> MetricsResponse:
    return MetricsResponse(
        total_value=_decimal_to_str(metrics.total_value),
        total_invested=_decimal_to_str(metrics.total_invested),
        total_gain=_decimal_to_str(metrics.total_gain),
        total_gain_percentage=_decimal_to_str(metrics.total_gain_percentage),
        diversification_score=_decimal_to_str(metrics.diversification_score),
        liabilities=_decimal_to_str(metrics.liabilities),
        net_worth=_decimal_to_str(metrics.net_worth),
        total_passive_income=_decimal_to_str(metrics.total_passive_income),
        average_yield=_decimal_to_str(metrics.average_yield),
        allocation_by_type={
            category.value: _decimal_to_str(value)
            for category, value in metrics.allocation_by_type.items()
        },
        allocation=[
            AllocationSliceResponse(
                category=s.category.value,
                value=_decimal_to_str(s.value),
                percent=_decimal_to_str(s.percent),
            )
            for s in metrics.allocation
        ],
    )


def _map_cash_flows(cash_flows: list[CashFlow]) -> list[CashFlowResponse]:
    return [
        CashFlowResponse(date=cf.date, amount=_decimal_to_str(cf.amount))
        for cf in cash_flows
    ]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "/metrics",
    response_model=MetricsResponse,
    summary="Compute portfolio metrics",
    response_description="Totals, allocation, diversification and passive income",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_metrics(
        request: Request,  # Required for rate limiting
        payload: AssetSnapshotRequest,
        service: AnalyticsService = Depends(get_analytics_service),
) -> MetricsResponse:
    """
    Compute portfolio metrics for an asset snapshot.

    An empty snapshot returns all zeros. Assets without a current price are
    valued at their purchase price.
    """
    metrics = service.get_metrics(payload.to_domain())
    return _map_metrics(metrics)


@router.post(
    "/diversification",
    response_model=DiversificationResponse,
    summary="Compute the diversification score",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_diversification(
        request: Request,
        payload: AssetSnapshotRequest,
        service: AnalyticsService = Depends(get_analytics_service),
) -> DiversificationResponse:
    """Diversification score (0-100) of the holdings; liabilities are ignored."""
    score = service.get_diversification_score(payload.to_domain())
    return DiversificationResponse(score=_decimal_to_str(score))


@router.post(
    "/cash-flows",
    response_model=CashFlowsResponse,
    summary="Build the XIRR cash-flow series",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_cash_flows(
        request: Request,
        payload: CashFlowsRequest,
        service: AnalyticsService = Depends(get_analytics_service),
) -> CashFlowsResponse:
    """
    One outflow per asset at its purchase date, then the current value at
    `as_of`, ascending by date.
    """
    cash_flows = service.get_cash_flows(
        payload.to_domain(),
        as_of=payload.as_of,
        net_liabilities=payload.net_liabilities,
    )
    return CashFlowsResponse(cash_flows=_map_cash_flows(cash_flows))


@router.post(
    "/xirr",
    response_model=XirrResponse,
    summary="Compute XIRR of a cash-flow series",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_xirr(
        request: Request,
        payload: XirrRequest,
) -> XirrResponse:
    """
    Annualized money-weighted return in percent.

    Fewer than two flows return 0. A series that does not converge returns
    the solver's last estimate.
    """
    cash_flows = [CashFlow(date=cf.date, amount=cf.amount) for cf in payload.cash_flows]
    xirr = calculate_xirr(
        cash_flows,
        initial_guess=payload.initial_guess,
        max_iterations=payload.max_iterations,
        tolerance=payload.tolerance,
    )
    return XirrResponse(xirr=_decimal_to_str(xirr))


@router.post(
    "/report",
    response_model=ReportResponse,
    summary="Full analytics report",
    response_description="Metrics, XIRR, insights and recommendations",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_report(
        request: Request,
        payload: ReportRequest,
        service: AnalyticsService = Depends(get_analytics_service),
) -> ReportResponse:
    """Everything the analytics engine knows about an asset snapshot."""
    report = service.build_report(
        payload.to_domain(),
        as_of=payload.as_of,
        net_liabilities=payload.net_liabilities,
    )
    return ReportResponse(
        as_of=report.as_of,
        metrics=_map_metrics(report.metrics),
        xirr=_decimal_to_str(report.xirr),
        cash_flows=_map_cash_flows(report.cash_flows),
        insights=[InsightResponse(level=i.level, text=i.text) for i in report.insights],
        recommendations=report.recommendations,
    )


@router.post(
    "/comparison",
    response_model=ComparisonResponse,
    summary="Compare portfolio growth with a benchmark",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_comparison(
        request: Request,
        payload: ComparisonRequest,
        service: AnalyticsService = Depends(get_analytics_service),
        prices: PriceService = Depends(get_price_service),
) -> ComparisonResponse:
    """
    Cumulative growth in percent since the first observation, for the
    portfolio and the benchmark. Fewer than two history points return an
    empty list.

    Without a posted benchmark, daily closes of `benchmark_symbol` (SPY by
    default) are fetched live. When that lookup fails the benchmark growth
    is reported as 0.
    """
    history = [(p.date, p.value) for p in payload.history]
    if len(history) < 2:
        return ComparisonResponse(points=[])

    if payload.benchmark is None:
        benchmark = prices.get_historical_prices(
            payload.benchmark_symbol, payload.benchmark_period
        )
    else:
        benchmark = [(p.date, p.value) for p in payload.benchmark]

    points = service.compare_with_benchmark(history, benchmark)
    return ComparisonResponse(points=[
        GrowthPointResponse(
            date=p.date,
            portfolio=_decimal_to_str(p.portfolio),
            benchmark=_decimal_to_str(p.benchmark),
        )
        for p in points
    ])
