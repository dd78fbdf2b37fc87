# backend/portfolio_analytics/services/analytics/service.py
"""
Analytics Service orchestrator.

Composes the calculators into one report for an asset snapshot:
1. Portfolio metrics (totals, allocation, diversification, passive income)
2. Cash-flow series and XIRR
3. Insights and recommendations

Architecture:
    AnalyticsService
        ├── uses → compute_metrics (metrics.py)
        ├── uses → build_cash_flows / calculate_xirr (returns.py)
        ├── uses → generate_insights / generate_recommendations (insights.py)
        └── uses → compare_growth (benchmark.py)

The service holds no state: the same instance is shared by every request
(see dependencies.py). Live prices are NOT fetched here; callers refresh the
snapshot through PriceService.refresh_assets first when they want them.

Usage:
    from portfolio_analytics.services.analytics import AnalyticsService

    service = AnalyticsService()
    report = service.build_report(assets, as_of=date(2024, 12, 31))

    print(f"Net worth: {report.metrics.net_worth}")
    print(f"XIRR: {report.xirr}%")
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Sequence

from portfolio_analytics.services.analytics.benchmark import Series, compare_growth
from portfolio_analytics.services.analytics.insights import (
    generate_insights,
    generate_recommendations,
)
from portfolio_analytics.services.analytics.metrics import (
    calculate_diversification_score,
    compute_metrics,
)
from portfolio_analytics.services.analytics.returns import (
    build_cash_flows,
    calculate_xirr,
)
from portfolio_analytics.services.analytics.types import (
    Asset,
    CashFlow,
    GrowthPoint,
    PortfolioMetrics,
    PortfolioReport,
)

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Main orchestrator for portfolio analytics.

    Every method is a pure function of its arguments; instances are safe to
    share across threads.
    """

    def get_metrics(self, assets: Sequence[Asset]) -> PortfolioMetrics:
        """Portfolio metrics for an asset snapshot."""
        return compute_metrics(assets)

    def get_diversification_score(self, assets: Sequence[Asset]) -> Decimal:
        """Diversification score (0-100) of an asset snapshot."""
        return calculate_diversification_score(assets)

    def get_cash_flows(
            self,
            assets: Sequence[Asset],
            as_of: date | None = None,
            net_liabilities: bool = False,
    ) -> list[CashFlow]:
        """Cash-flow series of an asset snapshot (see build_cash_flows)."""
        return build_cash_flows(assets, as_of=as_of, net_liabilities=net_liabilities)

    def compare_with_benchmark(
            self,
            history: Series,
            benchmark: Series,
    ) -> list[GrowthPoint]:
        """Cumulative growth of a net worth history against a benchmark."""
        return compare_growth(history, benchmark)

    def build_report(
            self,
            assets: Sequence[Asset],
            as_of: date | None = None,
            net_liabilities: bool = False,
    ) -> PortfolioReport:
        """
        Build the full analytics report for an asset snapshot.

        Args:
            assets: Asset snapshot (possibly empty)
            as_of: Valuation date for the terminal cash flow (default today)
            net_liabilities: Cash-flow liability convention
                             (see build_cash_flows)

        Returns:
            PortfolioReport with metrics, cash flows, XIRR (percent),
            insights and recommendations. Never raises for degenerate input.
        """
        as_of = as_of or date.today()

        metrics = compute_metrics(assets)
        cash_flows = build_cash_flows(assets, as_of=as_of, net_liabilities=net_liabilities)
        xirr = calculate_xirr(cash_flows)

        report = PortfolioReport(
            as_of=as_of,
            metrics=metrics,
            cash_flows=cash_flows,
            xirr=xirr,
            insights=generate_insights(assets, metrics),
            recommendations=generate_recommendations(metrics),
        )

        logger.info(
            f"Built report for {len(assets)} assets as of {as_of}: "
            f"net_worth={metrics.net_worth}, xirr={xirr}%"
        )
        return report
