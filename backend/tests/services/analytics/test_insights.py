# backend/tests/services/analytics/test_insights.py
"""
Unit tests for portfolio insights and recommendations.

Test Coverage:
- Diversification tiers and their rounding boundary
- Crypto exposure and debt-to-asset warnings
- Precious metals hint
- Allocation recommendations
"""

from decimal import Decimal

from conftest import make_asset
from portfolio_analytics.services.analytics.insights import (
    generate_insights,
    generate_recommendations,
)
from portfolio_analytics.services.analytics.metrics import compute_metrics
from portfolio_analytics.services.analytics.types import (
    AllocationSlice,
    AssetCategory,
    PortfolioMetrics,
)

EXCELLENT = "Excellent diversification! Your risk is well-spread across asset classes."
FAIR = "Fair diversification. Consider adding non-correlated assets like Gold or Bonds."
CONCENTRATED = "Highly concentrated portfolio. You are vulnerable to sector-specific downturns."
NO_METALS = "No Precious Metals found. Adding 5-10% Gold can hedge against inflation."


def _metrics(score: str = "50", **overrides) -> PortfolioMetrics:
    """PortfolioMetrics with only the fields a test cares about."""
    fields = dict(
        total_value=Decimal("1000"),
        total_invested=Decimal("1000"),
        total_gain=Decimal("0"),
        total_gain_percentage=Decimal("0"),
        diversification_score=Decimal(score),
        allocation_by_type={AssetCategory.GOLD: Decimal("1000")},
        liabilities=Decimal("0"),
        net_worth=Decimal("1000"),
        total_passive_income=Decimal("0"),
        average_yield=Decimal("0"),
        allocation=(),
    )
    fields.update(overrides)
    return PortfolioMetrics(**fields)


def _texts(insights) -> list[str]:
    return [i.text for i in insights]


# =============================================================================
# INSIGHTS
# =============================================================================

class TestDiversificationInsight:
    """Tests for the diversification tier insight."""

    def test_concentrated_portfolio(self):
        assets = [make_asset(AssetCategory.STOCKS, purchase_price="1000")]

        insights = generate_insights(assets, compute_metrics(assets))

        assert insights[0].level == "warning"
        assert insights[0].text == CONCENTRATED

    def test_excellent_diversification(self):
        assets = [
            make_asset(category, purchase_price="250")
            for category in (
                AssetCategory.STOCKS,
                AssetCategory.GOLD,
                AssetCategory.FIXED_INCOME,
                AssetCategory.REAL_ESTATE,
            )
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert insights[0].level == "success"
        assert insights[0].text == EXCELLENT

    def test_fair_diversification(self):
        insights = generate_insights([], _metrics(score="55"))

        assert insights[0].level == "info"
        assert insights[0].text == FAIR

    def test_score_is_rounded_half_up_before_comparison(self):
        assert generate_insights([], _metrics(score="70.4"))[0].text == FAIR
        assert generate_insights([], _metrics(score="70.5"))[0].text == EXCELLENT
        assert generate_insights([], _metrics(score="40.4"))[0].text == CONCENTRATED
        assert generate_insights([], _metrics(score="40.5"))[0].text == FAIR

    def test_boundaries_are_exclusive(self):
        assert generate_insights([], _metrics(score="70"))[0].text == FAIR
        assert generate_insights([], _metrics(score="40"))[0].text == CONCENTRATED


class TestRiskInsights:
    """Tests for crypto, leverage and precious metals insights."""

    def test_high_crypto_exposure(self):
        assets = [
            make_asset(AssetCategory.CRYPTO, purchase_price="300"),
            make_asset(AssetCategory.STOCKS, purchase_price="700"),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert (
            "High Crypto exposure (>30%). Ensure you can handle this level of volatility."
            in _texts(insights)
        )

    def test_crypto_at_threshold_is_fine(self):
        assets = [
            make_asset(AssetCategory.CRYPTO, purchase_price="200"),
            make_asset(AssetCategory.STOCKS, purchase_price="800"),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert not any("Crypto" in text for text in _texts(insights))

    def test_high_debt_ratio(self):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="1000"),
            make_asset(AssetCategory.LIABILITIES, purchase_price="1500"),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert (
            "Debt-to-Asset ratio is high (60%). Focus on reducing high-interest liabilities."
            in _texts(insights)
        )

    def test_debt_ratio_at_half_is_fine(self):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="1000"),
            make_asset(AssetCategory.LIABILITIES, purchase_price="1000"),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert not any("Debt-to-Asset" in text for text in _texts(insights))

    def test_only_liabilities(self):
        assets = [make_asset(AssetCategory.LIABILITIES, purchase_price="1000")]

        insights = generate_insights(assets, compute_metrics(assets))

        assert any("(100%)" in text for text in _texts(insights))

    def test_missing_precious_metals(self):
        assets = [make_asset(AssetCategory.STOCKS)]

        insights = generate_insights(assets, compute_metrics(assets))

        assert insights[-1].level == "info"
        assert insights[-1].text == NO_METALS

    def test_silver_counts_as_precious_metal(self):
        assets = [
            make_asset(AssetCategory.STOCKS),
            make_asset(AssetCategory.SILVER),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        assert NO_METALS not in _texts(insights)

    def test_empty_portfolio(self):
        insights = generate_insights([], compute_metrics([]))

        assert _texts(insights) == [CONCENTRATED, NO_METALS]

    def test_rule_order(self):
        assets = [
            make_asset(AssetCategory.CRYPTO, purchase_price="900"),
            make_asset(AssetCategory.STOCKS, purchase_price="100"),
            make_asset(AssetCategory.LIABILITIES, purchase_price="5000"),
        ]

        insights = generate_insights(assets, compute_metrics(assets))

        texts = _texts(insights)
        assert texts[0] == CONCENTRATED
        assert texts[1].startswith("High Crypto exposure (>90%)")
        assert texts[2].startswith("Debt-to-Asset ratio is high (83%)")
        assert texts[3] == NO_METALS


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

class TestRecommendations:
    """Tests for generate_recommendations."""

    def test_all_stocks(self):
        metrics = compute_metrics([make_asset(AssetCategory.STOCKS)])

        recommendations = generate_recommendations(metrics)

        assert len(recommendations) == 4
        assert recommendations[0].startswith("Your portfolio is heavily weighted toward stocks.")
        assert recommendations[1].startswith("No fixed income in your portfolio.")
        assert recommendations[2].startswith("Real estate can provide diversification")
        assert recommendations[3].startswith("Low diversification detected.")

    def test_balanced_portfolio_has_none(self):
        assets = [
            make_asset(category, purchase_price="250")
            for category in (
                AssetCategory.STOCKS,
                AssetCategory.GOLD,
                AssetCategory.FIXED_INCOME,
                AssetCategory.REAL_ESTATE,
            )
        ]

        assert generate_recommendations(compute_metrics(assets)) == []

    def test_no_fixed_income_hint_needs_stocks(self):
        metrics = _metrics(
            score="60",
            allocation=(
                AllocationSlice(AssetCategory.REAL_ESTATE, Decimal("500"), Decimal("50")),
                AllocationSlice(AssetCategory.GOLD, Decimal("500"), Decimal("50")),
            ),
        )

        assert generate_recommendations(metrics) == []

    def test_stock_threshold_is_exclusive(self):
        metrics = _metrics(
            score="42",
            allocation=(
                AllocationSlice(AssetCategory.STOCKS, Decimal("700"), Decimal("70")),
                AllocationSlice(AssetCategory.FIXED_INCOME, Decimal("300"), Decimal("30")),
            ),
        )

        recommendations = generate_recommendations(metrics)

        assert not any("heavily weighted" in r for r in recommendations)
        assert any("Real estate" in r for r in recommendations)

    def test_empty_portfolio(self):
        recommendations = generate_recommendations(compute_metrics([]))

        assert len(recommendations) == 2
        assert recommendations[0].startswith("Real estate")
        assert recommendations[1].startswith("Low diversification")
