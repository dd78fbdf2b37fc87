# backend/portfolio_analytics/services/analytics/metrics.py
"""
Portfolio metrics engine.

Pure reductions over an asset snapshot:
- Totals: holdings value, liabilities, net worth, invested capital, gain
- Allocation: current value and share per holdings category
- Diversification score: Herfindahl-Hirschman based, 0-100
- Passive income: interest and dividends, and the resulting average yield

Partitioning:
    An asset is a liability iff asset.is_liability (category LIABILITIES).
    Every other asset is a holding. The same partition is used by every
    metric in this module.

Formulas:
    net_worth       = Σ holdings (price × qty) - Σ liabilities (price × qty)
    total_invested  = Σ holdings (cost × qty) - Σ liabilities (cost × qty)
    total_gain      = net_worth - total_invested
    gain %          = total_gain / |total_invested| × 100

    p_i   = category value / total holdings value × 100
    HHI   = Σ p_i²                      (10000 for a single category)
    score = 100 - HHI / 100             (clamped to [0, 100])

Edge cases:
    Every division is guarded: an empty or zero-valued portfolio yields zeros.
    Inputs are NOT validated (negative prices or quantities flow through the
    arithmetic unchanged); validation belongs to the ingestion layer.

All functions are stateless and safe to call concurrently.
"""

import logging
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from portfolio_analytics.services.analytics.types import (
    AllocationSlice,
    Asset,
    AssetCategory,
    PortfolioMetrics,
)
from portfolio_analytics.services.constants import (
    HUNDRED,
    SCORE_MAX,
    SCORE_MIN,
    ZERO,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PASSIVE INCOME RULES
# =============================================================================
# Which attribute supplies the annual income rate for each category.
# None = the category produces no passive income.

YieldRule = Callable[[Asset], Decimal | None]


def _interest(asset: Asset) -> Decimal | None:
    return asset.interest_rate


def _dividends(asset: Asset) -> Decimal | None:
    return asset.dividend_yield


YIELD_RULES: dict[AssetCategory, YieldRule | None] = {
    AssetCategory.STOCKS: _dividends,
    AssetCategory.FIXED_INCOME: _interest,
    AssetCategory.CASH: _interest,
    AssetCategory.GOLD: None,
    AssetCategory.SILVER: None,
    AssetCategory.CRYPTO: None,
    AssetCategory.REAL_ESTATE: None,
    # Liabilities are never holdings, so they never reach the income loop
    AssetCategory.LIABILITIES: None,
}

_missing_rules = set(AssetCategory) - set(YIELD_RULES)
if _missing_rules:
    raise RuntimeError(
        f"YIELD_RULES is missing categories: {sorted(c.value for c in _missing_rules)}"
    )


# =============================================================================
# PARTITIONING
# =============================================================================

def partition_assets(assets: Iterable[Asset]) -> tuple[list[Asset], list[Asset]]:
    """
    Split assets into (holdings, liabilities).

    Args:
        assets: Asset snapshot (any order)

    Returns:
        Tuple of holdings and liabilities, each in input order
    """
    holdings: list[Asset] = []
    liabilities: list[Asset] = []
    for asset in assets:
        if asset.is_liability:
            liabilities.append(asset)
        else:
            holdings.append(asset)
    return holdings, liabilities


def _sum(values: Iterable[Decimal]) -> Decimal:
    # Decimal start so an empty sum stays Decimal
    return sum(values, ZERO)


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == ZERO:
        return ZERO
    return part / whole * HUNDRED


# =============================================================================
# ALLOCATION
# =============================================================================

def calculate_allocation_by_type(assets: Iterable[Asset]) -> dict[AssetCategory, Decimal]:
    """
    Sum current value per holdings category.

    Liabilities are excluded. Categories appear in first-seen order.

    Args:
        assets: Asset snapshot

    Returns:
        Mapping of category to current value
    """
    allocation: dict[AssetCategory, Decimal] = {}
    for asset in assets:
        if asset.is_liability:
            continue
        allocation[asset.category] = allocation.get(asset.category, ZERO) + asset.market_value
    return allocation


def calculate_allocation(assets: Iterable[Asset]) -> list[AllocationSlice]:
    """
    Allocation slices with percentages, largest first.

    Percent = category value / total holdings value × 100, or 0 when the
    holdings are worth nothing.
    """
    by_type = calculate_allocation_by_type(assets)
    total = _sum(by_type.values())

    slices = [
        AllocationSlice(category=category, value=value, percent=_percent(value, total))
        for category, value in by_type.items()
    ]
    slices.sort(key=lambda s: s.value, reverse=True)
    return slices


# =============================================================================
# DIVERSIFICATION
# =============================================================================

def calculate_hhi(allocation_by_type: dict[AssetCategory, Decimal]) -> Decimal:
    """
    Herfindahl-Hirschman Index of an allocation, on the 0-10000 scale.

    Returns 0 when the allocation is empty or worth nothing.
    """
    total = _sum(allocation_by_type.values())
    if total == ZERO:
        return ZERO

    hhi = ZERO
    for value in allocation_by_type.values():
        percentage = value / total * HUNDRED
        hhi += percentage * percentage
    return hhi


def calculate_diversification_score(assets: Iterable[Asset]) -> Decimal:
    """
    Diversification score from 0 (one category) to 100 (evenly spread).

    Formula: 100 - HHI / 100, clamped to [0, 100].

    An empty or zero-valued portfolio scores 0.
    """
    allocation = calculate_allocation_by_type(assets)
    if _sum(allocation.values()) == ZERO:
        return ZERO

    score = SCORE_MAX - calculate_hhi(allocation) / HUNDRED
    return min(max(score, SCORE_MIN), SCORE_MAX)


# =============================================================================
# PASSIVE INCOME
# =============================================================================

def calculate_asset_income(asset: Asset) -> Decimal:
    """
    Annual passive income of a single holding.

    income = price × quantity × rate / 100, where the rate comes from the
    category's yield rule. Liabilities and categories without a rule yield 0.
    """
    if asset.is_liability:
        return ZERO

    rule = YIELD_RULES[asset.category]
    if rule is None:
        return ZERO

    rate = rule(asset)
    if rate is None:
        return ZERO

    return asset.market_value * rate / HUNDRED


def calculate_passive_income(assets: Iterable[Asset]) -> Decimal:
    """Total annual passive income of the holdings."""
    return _sum(calculate_asset_income(asset) for asset in assets)


# =============================================================================
# COMBINED METRICS
# =============================================================================

def compute_metrics(assets: Sequence[Asset]) -> PortfolioMetrics:
    """
    Compute all portfolio metrics for an asset snapshot.

    Never raises for degenerate input: an empty list returns all zeros.

    Args:
        assets: Asset snapshot (possibly empty, any order)

    Returns:
        PortfolioMetrics
    """
    holdings, liabilities = partition_assets(assets)

    total_assets = _sum(a.market_value for a in holdings)
    total_liabilities = _sum(a.market_value for a in liabilities)
    net_worth = total_assets - total_liabilities

    # Liabilities reduce invested capital by their original principal
    total_invested = (
        _sum(a.cost_basis for a in holdings)
        - _sum(a.cost_basis for a in liabilities)
    )

    total_gain = net_worth - total_invested
    if total_invested != ZERO:
        total_gain_percentage = total_gain / abs(total_invested) * HUNDRED
    else:
        total_gain_percentage = ZERO

    passive_income = calculate_passive_income(holdings)
    average_yield = _percent(passive_income, total_assets)

    allocation = calculate_allocation(holdings)

    logger.debug(
        f"Computed metrics for {len(holdings)} holdings and "
        f"{len(liabilities)} liabilities"
    )

    return PortfolioMetrics(
        total_value=total_assets,
        total_invested=total_invested,
        total_gain=total_gain,
        total_gain_percentage=total_gain_percentage,
        diversification_score=calculate_diversification_score(holdings),
        allocation_by_type={s.category: s.value for s in allocation},
        liabilities=total_liabilities,
        net_worth=net_worth,
        total_passive_income=passive_income,
        average_yield=average_yield,
        allocation=tuple(allocation),
    )
