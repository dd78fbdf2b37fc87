# backend/tests/services/analytics/test_analytics_service.py
"""
Tests for the AnalyticsService orchestrator.

The individual calculators are covered by their own test modules; these
tests check that the service wires them together consistently.
"""

import logging
from datetime import date
from decimal import Decimal

import pytest

from conftest import make_asset
from portfolio_analytics.services.analytics import (
    AnalyticsService,
    AssetCategory,
    build_cash_flows,
    calculate_xirr,
    compute_metrics,
)


@pytest.fixture
def service() -> AnalyticsService:
    return AnalyticsService()


class TestBuildReport:
    """Tests for AnalyticsService.build_report."""

    def test_report_matches_calculators(self, service, sample_portfolio):
        as_of = date(2024, 12, 31)

        report = service.build_report(sample_portfolio, as_of=as_of)

        assert report.as_of == as_of
        assert report.metrics == compute_metrics(sample_portfolio)
        assert report.cash_flows == build_cash_flows(sample_portfolio, as_of=as_of)
        assert report.xirr == calculate_xirr(report.cash_flows)
        assert report.xirr > Decimal("0")

    def test_insights_and_recommendations(self, service, sample_portfolio):
        report = service.build_report(sample_portfolio, as_of=date(2024, 12, 31))

        texts = [i.text for i in report.insights]
        assert texts[0].startswith("Highly concentrated")
        assert any(t.startswith("No Precious Metals") for t in texts)
        assert any(r.startswith("Real estate") for r in report.recommendations)

    def test_empty_snapshot_never_raises(self, service):
        report = service.build_report([], as_of=date(2024, 1, 1))

        assert report.metrics.net_worth == Decimal("0")
        assert report.xirr == Decimal("0")
        assert len(report.cash_flows) == 1

    def test_as_of_defaults_to_today(self, service):
        report = service.build_report([make_asset()])
        assert report.as_of == date.today()

    def test_net_liabilities_option(self, service):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="1000", purchase_date=date(2024, 1, 1)),
            make_asset(AssetCategory.LIABILITIES, purchase_price="500", purchase_date=date(2024, 1, 1)),
        ]

        default = service.build_report(assets, as_of=date(2024, 12, 31))
        netted = service.build_report(assets, as_of=date(2024, 12, 31), net_liabilities=True)

        assert default.cash_flows[-1].amount == Decimal("1500")
        assert netted.cash_flows[-1].amount == Decimal("500")

    def test_logs_summary(self, service, sample_portfolio, caplog):
        with caplog.at_level(logging.INFO):
            service.build_report(sample_portfolio, as_of=date(2024, 12, 31))

        assert "Built report for 2 assets" in caplog.text


class TestServiceShortcuts:
    """Tests for the single-metric service methods."""

    def test_get_metrics(self, service, sample_portfolio):
        assert service.get_metrics(sample_portfolio).total_value == Decimal("33925")

    def test_get_diversification_score(self, service):
        assets = [
            make_asset(AssetCategory.STOCKS, purchase_price="500"),
            make_asset(AssetCategory.GOLD, purchase_price="500"),
        ]
        assert service.get_diversification_score(assets) == Decimal("50")

    def test_get_cash_flows(self, service, sample_portfolio):
        flows = service.get_cash_flows(sample_portfolio, as_of=date(2024, 1, 1))

        assert [cf.date for cf in flows] == [
            date(2023, 1, 15),
            date(2023, 6, 1),
            date(2024, 1, 1),
        ]
        assert flows[-1].amount == Decimal("33925")

    def test_compare_with_benchmark(self, service):
        points = service.compare_with_benchmark(
            [(date(2024, 1, 1), Decimal("100")), (date(2024, 1, 2), Decimal("150"))],
            [(date(2024, 1, 1), Decimal("10")), (date(2024, 1, 2), Decimal("11"))],
        )

        assert points[-1].portfolio == Decimal("50")
        assert points[-1].benchmark == Decimal("10")
