# backend/tests/services/analytics/test_metrics.py
"""
Unit tests for the portfolio metrics engine.

These tests verify the pure calculation logic; no providers are involved.
All tests use known values that can be verified by hand.

Test Coverage:
- partition_assets: holdings vs liabilities
- calculate_allocation_by_type / calculate_allocation
- calculate_hhi / calculate_diversification_score
- calculate_asset_income / calculate_passive_income
- compute_metrics: combined figures and degenerate input
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from conftest import make_asset
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
from portfolio_analytics.services.analytics.types import AssetCategory


# =============================================================================
# PARTITIONING
# =============================================================================

class TestPartitionAssets:
    """Tests for partition_assets."""

    def test_splits_on_category(self):
        stock = make_asset(AssetCategory.STOCKS)
        loan = make_asset(AssetCategory.LIABILITIES)
        gold = make_asset(AssetCategory.GOLD)

        holdings, liabilities = partition_assets([stock, loan, gold])

        assert holdings == [stock, gold]
        assert liabilities == [loan]

    def test_empty(self):
        assert partition_assets([]) == ([], [])


# =============================================================================
# ALLOCATION
# =============================================================================

class TestAllocation:
    """Tests for allocation by category."""

    def test_sums_per_category(self):
        assets = [
            make_asset(AssetCategory.STOCKS, quantity="10", purchase_price="100"),
            make_asset(AssetCategory.STOCKS, quantity="5", purchase_price="20", current_price="40"),
            make_asset(AssetCategory.CRYPTO, quantity="2", purchase_price="50"),
        ]

        allocation = calculate_allocation_by_type(assets)

        assert allocation == {
            AssetCategory.STOCKS: Decimal("1200"),
            AssetCategory.CRYPTO: Decimal("100"),
        }

    def test_liabilities_excluded(self):
        assets = [
            make_asset(AssetCategory.CASH, quantity="100", purchase_price="1"),
            make_asset(AssetCategory.LIABILITIES, quantity="1", purchase_price="5000"),
        ]

        allocation = calculate_allocation_by_type(assets)

        assert AssetCategory.LIABILITIES not in allocation
        assert allocation == {AssetCategory.CASH: Decimal("100")}

    def test_slices_sorted_largest_first(self):
        assets = [
            make_asset(AssetCategory.GOLD, quantity="1", purchase_price="250"),
            make_asset(AssetCategory.STOCKS, quantity="1", purchase_price="750"),
        ]

        slices = calculate_allocation(assets)

        assert [s.category for s in slices] == [AssetCategory.STOCKS, AssetCategory.GOLD]
        assert slices[0].percent == Decimal("75")
        assert slices[1].percent == Decimal("25")

    def test_percentages_sum_to_hundred(self):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="333"),
            make_asset(AssetCategory.CRYPTO, purchase_price="333"),
            make_asset(AssetCategory.REAL_ESTATE, purchase_price="334"),
        ]

        total = sum(s.percent for s in calculate_allocation(assets))

        assert float(total) == pytest.approx(100.0, abs=1e-9)

    def test_zero_valued_holdings_have_zero_percent(self):
        slices = calculate_allocation([make_asset(AssetCategory.STOCKS, quantity="0")])

        assert len(slices) == 1
        assert slices[0].percent == Decimal("0")


# =============================================================================
# DIVERSIFICATION
# =============================================================================

class TestDiversification:
    """Tests for HHI and diversification score."""

    def test_hhi_single_category(self):
        assert calculate_hhi({AssetCategory.STOCKS: Decimal("500")}) == Decimal("10000")

    def test_hhi_empty(self):
        assert calculate_hhi({}) == Decimal("0")

    def test_single_category_scores_zero(self):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="100"),
            make_asset(AssetCategory.STOCKS, purchase_price="900"),
        ]
        assert calculate_diversification_score(assets) == Decimal("0")

    def test_even_spread_over_four_categories(self):
        # HHI = 4 × 25² = 2500 -> 100 - 25 = 75
        assets = [
            make_asset(category, purchase_price="250")
            for category in (
                AssetCategory.STOCKS,
                AssetCategory.GOLD,
                AssetCategory.FIXED_INCOME,
                AssetCategory.REAL_ESTATE,
            )
        ]
        assert calculate_diversification_score(assets) == Decimal("75")

    def test_even_spread_over_all_holding_categories(self):
        holding_categories = [c for c in AssetCategory if c is not AssetCategory.LIABILITIES]
        assets = [make_asset(c, purchase_price="10") for c in holding_categories]

        score = calculate_diversification_score(assets)

        expected = 100 - 100 / len(holding_categories)
        assert float(score) == pytest.approx(expected, abs=1e-9)

    def test_liabilities_do_not_affect_score(self):
        holdings = [
            make_asset(AssetCategory.STOCKS, purchase_price="500"),
            make_asset(AssetCategory.GOLD, purchase_price="500"),
        ]
        with_debt = holdings + [make_asset(AssetCategory.LIABILITIES, purchase_price="10000")]

        assert calculate_diversification_score(holdings) == Decimal("50")
        assert calculate_diversification_score(with_debt) == Decimal("50")

    def test_empty_portfolio_scores_zero(self):
        assert calculate_diversification_score([]) == Decimal("0")

    def test_zero_valued_portfolio_scores_zero(self):
        assets = [
            make_asset(AssetCategory.STOCKS, quantity="0"),
            make_asset(AssetCategory.GOLD, quantity="0"),
        ]
        assert calculate_diversification_score(assets) == Decimal("0")

    def test_score_within_bounds(self):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="1"),
            make_asset(AssetCategory.CRYPTO, purchase_price="99999"),
        ]
        score = calculate_diversification_score(assets)
        assert Decimal("0") <= score <= Decimal("100")


# =============================================================================
# PASSIVE INCOME
# =============================================================================

class TestPassiveIncome:
    """Tests for interest and dividend income."""

    def test_every_category_has_a_rule(self):
        assert set(YIELD_RULES) == set(AssetCategory)

    def test_stock_dividends(self):
        asset = make_asset(
            AssetCategory.STOCKS,
            quantity="10",
            purchase_price="100",
            current_price="200",
            dividend_yield=Decimal("2"),
        )
        # 2000 × 2%
        assert calculate_asset_income(asset) == Decimal("40")

    def test_fixed_income_and_cash_interest(self):
        bond = make_asset(
            AssetCategory.FIXED_INCOME,
            quantity="10",
            purchase_price="1000",
            interest_rate=Decimal("5"),
        )
        cash = make_asset(
            AssetCategory.CASH,
            quantity="1000",
            purchase_price="1",
            interest_rate=Decimal("1.5"),
        )
        assert calculate_asset_income(bond) == Decimal("500")
        assert calculate_asset_income(cash) == Decimal("15")

    def test_stock_interest_rate_is_ignored(self):
        asset = make_asset(AssetCategory.STOCKS, interest_rate=Decimal("10"))
        assert calculate_asset_income(asset) == Decimal("0")

    def test_categories_without_income(self):
        for category in (AssetCategory.GOLD, AssetCategory.CRYPTO, AssetCategory.REAL_ESTATE):
            asset = make_asset(
                category,
                interest_rate=Decimal("5"),
                dividend_yield=Decimal("5"),
            )
            assert calculate_asset_income(asset) == Decimal("0")

    def test_liability_interest_is_not_income(self):
        loan = make_asset(
            AssetCategory.LIABILITIES,
            purchase_price="10000",
            interest_rate=Decimal("7"),
        )
        assert calculate_asset_income(loan) == Decimal("0")

    def test_missing_rate(self):
        assert calculate_asset_income(make_asset(AssetCategory.FIXED_INCOME)) == Decimal("0")

    def test_total_passive_income(self, sample_portfolio):
        assert calculate_passive_income(sample_portfolio) == Decimal("800")


# =============================================================================
# COMBINED METRICS
# =============================================================================

class TestComputeMetrics:
    """Tests for compute_metrics."""

    def test_sample_portfolio(self, sample_portfolio):
        metrics = compute_metrics(sample_portfolio)

        assert metrics.total_value == Decimal("33925")
        assert metrics.total_invested == Decimal("32500")
        assert metrics.total_gain == Decimal("1425")
        assert float(metrics.total_gain_percentage) == pytest.approx(4.3846, abs=1e-4)
        assert metrics.liabilities == Decimal("0")
        assert metrics.net_worth == Decimal("33925")
        assert metrics.total_passive_income == Decimal("800")
        assert float(metrics.average_yield) == pytest.approx(2.3581, abs=1e-4)
        assert float(metrics.diversification_score) == pytest.approx(38.77, abs=0.01)
        assert metrics.allocation_by_type == {
            AssetCategory.CASH: Decimal("25000"),
            AssetCategory.STOCKS: Decimal("8925"),
        }

    def test_empty_portfolio_is_all_zeros(self):
        metrics = compute_metrics([])

        assert metrics.total_value == Decimal("0")
        assert metrics.total_invested == Decimal("0")
        assert metrics.total_gain == Decimal("0")
        assert metrics.total_gain_percentage == Decimal("0")
        assert metrics.diversification_score == Decimal("0")
        assert metrics.liabilities == Decimal("0")
        assert metrics.net_worth == Decimal("0")
        assert metrics.total_passive_income == Decimal("0")
        assert metrics.average_yield == Decimal("0")
        assert metrics.allocation_by_type == {}
        assert metrics.allocation == ()

    def test_liabilities_reduce_net_worth_and_invested(self):
        house = make_asset(
            AssetCategory.REAL_ESTATE,
            purchase_price="300000",
            current_price="350000",
        )
        mortgage = make_asset(
            AssetCategory.LIABILITIES,
            purchase_price="200000",
            current_price="180000",
        )

        metrics = compute_metrics([house, mortgage])

        assert metrics.total_value == Decimal("350000")
        assert metrics.liabilities == Decimal("180000")
        assert metrics.net_worth == Decimal("170000")
        assert metrics.total_invested == Decimal("100000")
        assert metrics.total_gain == Decimal("70000")
        assert metrics.total_gain_percentage == Decimal("70")

    def test_adding_a_liability_lowers_net_worth_by_its_value(self, sample_portfolio):
        before = compute_metrics(sample_portfolio)
        loan = make_asset(AssetCategory.LIABILITIES, purchase_price="5000", current_price="4000")

        after = compute_metrics(sample_portfolio + [loan])

        assert after.net_worth == before.net_worth - Decimal("4000")
        assert after.total_value == before.total_value
        assert after.diversification_score == before.diversification_score
        assert after.allocation_by_type == before.allocation_by_type

    @pytest.mark.parametrize("smaller,larger", [
        ("0", "1"),
        ("1", "2"),
        ("2.5", "2.51"),
        ("10", "1000"),
    ])
    def test_larger_liability_lowers_net_worth_and_invested(
            self, sample_portfolio, smaller, larger,
    ):
        loan = make_asset(
            AssetCategory.LIABILITIES,
            quantity=smaller,
            purchase_price="5000",
            current_price="4000",
        )
        bigger_loan = replace(loan, quantity=Decimal(larger))

        before = compute_metrics(sample_portfolio + [loan])
        after = compute_metrics(sample_portfolio + [bigger_loan])

        assert after.net_worth < before.net_worth
        assert after.total_invested < before.total_invested
        assert after.total_value == before.total_value

    def test_negative_invested_uses_absolute_value(self):
        # Only a liability: invested -1000, net worth -800, gain +200
        loan = make_asset(AssetCategory.LIABILITIES, purchase_price="1000", current_price="800")

        metrics = compute_metrics([loan])

        assert metrics.total_invested == Decimal("-1000")
        assert metrics.total_gain == Decimal("200")
        assert metrics.total_gain_percentage == Decimal("20")

    def test_missing_current_price_falls_back_to_purchase_price(self):
        asset = make_asset(AssetCategory.GOLD, quantity="2", purchase_price="1900")

        metrics = compute_metrics([asset])

        assert metrics.total_value == Decimal("3800")
        assert metrics.total_gain == Decimal("0")

    def test_input_order_does_not_matter(self, sample_portfolio):
        forward = compute_metrics(sample_portfolio)
        backward = compute_metrics(list(reversed(sample_portfolio)))

        assert forward.net_worth == backward.net_worth
        assert forward.diversification_score == backward.diversification_score
        assert forward.allocation == backward.allocation

    def test_negative_inputs_flow_through(self):
        asset = make_asset(
            AssetCategory.STOCKS,
            quantity="-2",
            purchase_price="10",
            purchase_date=date(2024, 1, 1),
        )
        metrics = compute_metrics([asset])
        assert metrics.total_value == Decimal("-20")

    def test_percent_of(self, sample_portfolio):
        metrics = compute_metrics(sample_portfolio)

        assert float(metrics.percent_of(AssetCategory.CASH)) == pytest.approx(73.69, abs=0.01)
        assert metrics.percent_of(AssetCategory.GOLD) == Decimal("0")
