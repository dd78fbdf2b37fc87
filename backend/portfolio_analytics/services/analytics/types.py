# backend/portfolio_analytics/services/analytics/types.py
"""
Data types for the analytics engine.

These dataclasses are the engine's input and output. They are NOT Pydantic
schemas - those live in portfolio_analytics/schemas/ for API serialization.

Design Principles:
- Immutable value objects (frozen=True): an Asset is a snapshot taken at
  computation time, PortfolioMetrics is recomputed on every call
- Decimal for all financial values
- The engine performs NO currency conversion: amounts in different
  currencies are summed as-is (known limitation, see DESIGN.md)

Type Hierarchy:
    AssetCategory    - Closed set of asset categories
    Asset            - One holding or liability (input)
    CashFlow         - Dated signed amount for XIRR
    AllocationSlice  - Value and share of one category
    PortfolioMetrics - Aggregated portfolio figures (output)
    Insight          - Rule-based advice line
    GrowthPoint      - Portfolio vs benchmark cumulative growth
    PortfolioReport  - Everything the analytics service produces
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Mapping

from portfolio_analytics.services.exceptions import (
    UnsupportedCategoryError,
    ValidationError,
)


class AssetCategory(str, Enum):
    """
    Asset categories understood by the engine.

    The category decides which computations apply: the passive income source
    (interest vs dividends) and whether the asset subtracts from net worth.
    """
    STOCKS = "stocks"
    GOLD = "gold"
    SILVER = "silver"
    CRYPTO = "crypto"
    REAL_ESTATE = "real_estate"
    FIXED_INCOME = "fixed_income"
    CASH = "cash"
    LIABILITIES = "liabilities"

    @classmethod
    def parse(cls, value: str | AssetCategory) -> AssetCategory:
        """
        Resolve a category from its value (case-insensitive).

        Raises:
            UnsupportedCategoryError: If the value is not a known category
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedCategoryError(str(value)) from None


# =============================================================================
# INPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class Asset:
    """
    Snapshot of a single holding or liability.

    Attributes:
        id: Opaque identifier, unique within a portfolio
        category: Asset category (canonical liability signal)
        quantity: Units held (non-negative in practice, not validated)
        purchase_price: Unit cost at acquisition
        current_price: Live unit price, None when no quote is available
        purchase_date: Acquisition date (cash-flow event date)
        interest_rate: Annual interest in percent (fixed income, cash, liabilities)
        dividend_yield: Annual dividend yield in percent (stocks)
        currency: ISO code, display only
        name: Display name
        symbol: Ticker / coin id used for price lookups

    Note:
        `category` is the single source of truth for liabilities.
        `is_liability` is derived from it; ingestion folds an explicit
        liability flag into the category (see from_record).
    """

    id: str
    category: AssetCategory
    quantity: Decimal
    purchase_price: Decimal
    current_price: Decimal | None = None
    purchase_date: date | None = None
    interest_rate: Decimal | None = None
    dividend_yield: Decimal | None = None
    currency: str = "USD"
    name: str | None = None
    symbol: str | None = None

    @property
    def is_liability(self) -> bool:
        """True for debts, which subtract from net worth."""
        return self.category is AssetCategory.LIABILITIES

    @property
    def price(self) -> Decimal:
        """Current unit price, falling back to the purchase price when unquoted."""
        if self.current_price is None:
            return self.purchase_price
        return self.current_price

    @property
    def market_value(self) -> Decimal:
        """price × quantity."""
        return self.price * self.quantity

    @property
    def cost_basis(self) -> Decimal:
        """purchase_price × quantity."""
        return self.purchase_price * self.quantity

    def with_price(self, current_price: Decimal | None) -> Asset:
        """Return a copy carrying a refreshed current price."""
        return replace(self, current_price=current_price)

    @classmethod
    def from_record(
            cls,
            *,
            id: str,
            category: str | AssetCategory,
            quantity: Decimal,
            purchase_price: Decimal,
            is_liability: bool | None = None,
            **fields: Any,
    ) -> Asset:
        """
        Build an Asset from a persistence/UI record.

        Folds the redundant liability flag into the category:
        - is_liability=True with any category -> category LIABILITIES
        - is_liability=False with category LIABILITIES -> ValidationError
        - is_liability=None -> category is taken as-is

        Raises:
            UnsupportedCategoryError: Unknown category
            ValidationError: Liability flag contradicts the category
        """
        resolved = AssetCategory.parse(category)

        if is_liability is True:
            resolved = AssetCategory.LIABILITIES
        elif is_liability is False and resolved is AssetCategory.LIABILITIES:
            raise ValidationError(
                f"Asset {id} has category 'liabilities' but is_liability=False",
                field="is_liability",
            )

        return cls(
            id=str(id),
            category=resolved,
            quantity=quantity,
            purchase_price=purchase_price,
            **fields,
        )


@dataclass(frozen=True)
class CashFlow:
    """
    A dated cash flow for XIRR.

    Attributes:
        date: When the flow occurred (date or datetime; one kind per series)
        amount: Negative = money invested (outflow),
                positive = money returned or current value (inflow)
    """
    date: date | datetime
    amount: Decimal


# =============================================================================
# OUTPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class AllocationSlice:
    """
    Current value of one holdings category and its share of total assets.

    Attributes:
        category: Asset category (never LIABILITIES)
        value: Sum of price × quantity for the category
        percent: value / total assets × 100 (0 when total assets is 0)
    """
    category: AssetCategory
    value: Decimal
    percent: Decimal


@dataclass(frozen=True)
class PortfolioMetrics:
    """
    Portfolio-level figures derived from one asset snapshot.

    Attributes:
        total_value: Current value of holdings (liabilities excluded)
        total_invested: Holdings cost minus liability principal
        total_gain: net_worth - total_invested
        total_gain_percentage: total_gain / |total_invested| × 100
        diversification_score: 0-100, higher = more diversified
        allocation_by_type: Category -> current value (holdings only)
        liabilities: Current value of liabilities
        net_worth: total_value - liabilities
        total_passive_income: Annual interest + dividends of holdings
        average_yield: total_passive_income / total_value × 100
        allocation: Allocation slices sorted by value, largest first
    """
    total_value: Decimal
    total_invested: Decimal
    total_gain: Decimal
    total_gain_percentage: Decimal
    diversification_score: Decimal
    allocation_by_type: Mapping[AssetCategory, Decimal]
    liabilities: Decimal
    net_worth: Decimal
    total_passive_income: Decimal
    average_yield: Decimal
    allocation: tuple[AllocationSlice, ...] = ()

    def percent_of(self, category: AssetCategory) -> Decimal:
        """Allocation percent of a category, 0 if the portfolio holds none."""
        for allocation_slice in self.allocation:
            if allocation_slice.category is category:
                return allocation_slice.percent
        return Decimal("0")


@dataclass(frozen=True)
class Insight:
    """One line of portfolio advice."""
    level: Literal["success", "warning", "info"]
    text: str


@dataclass(frozen=True)
class GrowthPoint:
    """
    Cumulative growth since the first observation, in percent.

    Attributes:
        date: Observation date
        portfolio: Portfolio growth (value / first value - 1) × 100
        benchmark: Benchmark growth over the same span
    """
    date: date
    portfolio: Decimal
    benchmark: Decimal


@dataclass
class PortfolioReport:
    """
    Combined result of the analytics service.

    Attributes:
        as_of: Valuation date (terminal cash-flow date)
        metrics: Aggregated portfolio metrics
        cash_flows: Cash-flow series fed to the XIRR solver
        xirr: Annualized money-weighted return in percent
        insights: Rule-based portfolio insights
        recommendations: Allocation recommendations
    """
    as_of: date
    metrics: PortfolioMetrics
    cash_flows: list[CashFlow] = field(default_factory=list)
    xirr: Decimal = Decimal("0")
    insights: list[Insight] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
