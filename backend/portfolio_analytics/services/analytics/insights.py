# backend/portfolio_analytics/services/analytics/insights.py
"""
Rule-based portfolio insights and allocation recommendations.

Both functions read an already computed PortfolioMetrics; they never
recompute totals.

Insight rules (first match for diversification, the rest independent):
    score > 70                          -> success
    score > 40                          -> info
    otherwise                           -> warning
    crypto / total_value > 20%          -> warning
    liabilities / (total + liab) > 50%  -> warning
    no gold and no silver               -> info

The diversification score is rounded half-up to a whole number before it is
compared, so 70.4 counts as 70 (fair) and 70.5 as 71 (excellent).

Recommendation rules:
    stocks > 70%                        -> rebalance toward bonds
    no fixed income while stocks > 0    -> add bonds
    no real estate                      -> consider 10-20%
    score < 30                          -> spread investments
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from portfolio_analytics.services.analytics.types import (
    Asset,
    AssetCategory,
    Insight,
    PortfolioMetrics,
)
from portfolio_analytics.services.constants import (
    HUNDRED,
    INSIGHT_CRYPTO_RATIO,
    INSIGHT_DEBT_RATIO,
    INSIGHT_EXCELLENT_DIVERSIFICATION,
    INSIGHT_FAIR_DIVERSIFICATION,
    RECOMMEND_MAX_STOCK_PERCENT,
    RECOMMEND_MIN_DIVERSIFICATION,
    ZERO,
)

logger = logging.getLogger(__name__)

_WHOLE = Decimal("1")


def _round_whole(value: Decimal) -> Decimal:
    return value.quantize(_WHOLE, rounding=ROUND_HALF_UP)


# =============================================================================
# INSIGHTS
# =============================================================================

def generate_insights(
        assets: Sequence[Asset],
        metrics: PortfolioMetrics,
) -> list[Insight]:
    """
    Generate advice lines for a portfolio.

    Args:
        assets: The snapshot the metrics were computed from
        metrics: Result of compute_metrics(assets)

    Returns:
        Insights in rule order: diversification first, then crypto
        exposure, leverage and precious metals when they apply
    """
    insights: list[Insight] = []

    score = _round_whole(metrics.diversification_score)

    if score > INSIGHT_EXCELLENT_DIVERSIFICATION:
        insights.append(Insight(
            level="success",
            text="Excellent diversification! Your risk is well-spread across asset classes.",
        ))
    elif score > INSIGHT_FAIR_DIVERSIFICATION:
        insights.append(Insight(
            level="info",
            text="Fair diversification. Consider adding non-correlated assets like Gold or Bonds.",
        ))
    else:
        insights.append(Insight(
            level="warning",
            text="Highly concentrated portfolio. You are vulnerable to sector-specific downturns.",
        ))

    allocation = metrics.allocation_by_type

    if metrics.total_value != ZERO:
        crypto_ratio = allocation.get(AssetCategory.CRYPTO, ZERO) / metrics.total_value
        if crypto_ratio > INSIGHT_CRYPTO_RATIO:
            insights.append(Insight(
                level="warning",
                text=(
                    f"High Crypto exposure (>{_round_whole(crypto_ratio * HUNDRED)}%). "
                    "Ensure you can handle this level of volatility."
                ),
            ))

    gross_assets = metrics.total_value + metrics.liabilities
    if gross_assets != ZERO:
        debt_ratio = metrics.liabilities / gross_assets
        if debt_ratio > INSIGHT_DEBT_RATIO:
            insights.append(Insight(
                level="warning",
                text=(
                    f"Debt-to-Asset ratio is high ({_round_whole(debt_ratio * HUNDRED)}%). "
                    "Focus on reducing high-interest liabilities."
                ),
            ))

    has_gold = allocation.get(AssetCategory.GOLD, ZERO) != ZERO
    has_silver = allocation.get(AssetCategory.SILVER, ZERO) != ZERO
    if not has_gold and not has_silver:
        insights.append(Insight(
            level="info",
            text="No Precious Metals found. Adding 5-10% Gold can hedge against inflation.",
        ))

    logger.debug(f"Generated {len(insights)} insights for {len(assets)} assets")
    return insights


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

def generate_recommendations(metrics: PortfolioMetrics) -> list[str]:
    """Allocation recommendations derived from category percentages."""
    recommendations: list[str] = []

    stocks = metrics.percent_of(AssetCategory.STOCKS)
    fixed_income = metrics.percent_of(AssetCategory.FIXED_INCOME)
    real_estate = metrics.percent_of(AssetCategory.REAL_ESTATE)

    if stocks > RECOMMEND_MAX_STOCK_PERCENT:
        recommendations.append(
            "Your portfolio is heavily weighted toward stocks. "
            "Consider increasing bond allocation for stability."
        )
    if fixed_income == ZERO and stocks > ZERO:
        recommendations.append(
            "No fixed income in your portfolio. "
            "Consider adding bonds for downside protection."
        )
    if real_estate == ZERO:
        recommendations.append(
            "Real estate can provide diversification and inflation protection. "
            "Consider allocating 10-20%."
        )
    if metrics.diversification_score < RECOMMEND_MIN_DIVERSIFICATION:
        recommendations.append(
            "Low diversification detected. "
            "Spread investments across more asset types and sectors."
        )

    return recommendations
