# backend/portfolio_analytics/services/analytics/returns.py
"""
Money-weighted return (XIRR) for an asset snapshot.

This module contains:
- build_cash_flows: Turns assets into a dated cash-flow series
- calculate_xirr: Newton-Raphson XIRR solver
- calculate_portfolio_xirr: Both steps in one call

Formula:
    XIRR solves: Σ CF_i / (1 + r)^((d_i - d_0) / 365) = 0

    f(r)  = Σ CF_i / (1 + r)^t_i
    f'(r) = Σ -t_i × CF_i / (1 + r)^(t_i + 1)
    r_{n+1} = r_n - f(r_n) / f'(r_n)

Sign convention:
    Negative amounts are money put into the portfolio (purchases), positive
    amounts are money coming back (the current value at the valuation date).

Solver policy:
    - Fewer than 2 cash flows: 0
    - Converged (|r_{n+1} - r_n| < tolerance): r_{n+1} × 100
    - Not converged after max_iterations: the last iterate × 100. This is
      not treated as an error; a warning is logged.
    - Degenerate states return 0 with a warning: zero derivative, a rate at
      or below -100% (the discount base 1 + r would be non-positive), float
      overflow, or a non-finite iterate.

Precision Note:
    The solver iterates in float (exponentials with fractional exponents are
    not supported by Decimal for negative bases and are slow otherwise). The
    percentage is converted back to Decimal with 8 decimal places.
"""

import logging
import math
from datetime import date, datetime, timedelta
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Sequence

from portfolio_analytics.services.analytics.types import Asset, CashFlow
from portfolio_analytics.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    XIRR_INITIAL_GUESS,
    XIRR_MAX_ITERATIONS,
    XIRR_PRECISION,
    XIRR_TOLERANCE,
    ZERO,
)

logger = logging.getLogger(__name__)

_ONE_YEAR = timedelta(days=CALENDAR_DAYS_PER_YEAR)
_WIDE_CONTEXT = Context(prec=400)


# =============================================================================
# CASH-FLOW CONSTRUCTION
# =============================================================================

def build_cash_flows(
        assets: Sequence[Asset],
        as_of: date | None = None,
        net_liabilities: bool = False,
) -> list[CashFlow]:
    """
    Build the XIRR cash-flow series for an asset snapshot.

    One event per asset at its purchase date, then one terminal event at
    `as_of` carrying the portfolio's current value. Events are returned in
    ascending date order (stable for equal dates).

    Two liability conventions:

    net_liabilities=False (default):
        Every asset, liabilities included, is an outflow of
        -(purchase_price × quantity), and the terminal inflow is the current
        value of ALL assets with liabilities ADDED. This treats a debt like
        any other position and is inconsistent with the net worth convention
        of the metrics engine, where liabilities subtract.

    net_liabilities=True:
        A liability's principal is an inflow (+purchase_price × quantity,
        money received when borrowing) and the terminal inflow is the net
        worth (holdings value minus liabilities value).

    Args:
        assets: Asset snapshot
        as_of: Valuation date, also used for assets without a purchase date.
               Defaults to today.
        net_liabilities: Select the liability convention (see above)

    Returns:
        Cash flows sorted ascending by date. An empty snapshot yields a
        single zero terminal flow.
    """
    as_of = as_of or date.today()

    cash_flows: list[CashFlow] = []
    terminal_value = ZERO

    for asset in assets:
        flow_date = asset.purchase_date or as_of

        if net_liabilities and asset.is_liability:
            cash_flows.append(CashFlow(date=flow_date, amount=asset.cost_basis))
            terminal_value -= asset.market_value
        else:
            cash_flows.append(CashFlow(date=flow_date, amount=-asset.cost_basis))
            terminal_value += asset.market_value

    cash_flows.append(CashFlow(date=as_of, amount=terminal_value))

    # sorted() is stable: same-day purchases keep input order, and the
    # terminal flow stays after any purchase made on the valuation date
    return sorted(cash_flows, key=lambda cf: cf.date)


# =============================================================================
# XIRR SOLVER
# =============================================================================

def _year_fraction(start: date | datetime, end: date | datetime) -> float:
    """Elapsed time in 365-day years."""
    return (end - start) / _ONE_YEAR


def _to_percent(rate: float) -> Decimal:
    percent = rate * 100
    if not math.isfinite(percent):
        logger.warning(f"XIRR rate {rate:.6g} overflows as a percentage, returning 0")
        return ZERO
    # Wide enough for any finite float at 8 decimal places
    return Decimal(str(percent)).quantize(
        XIRR_PRECISION, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT
    )


def calculate_xirr(
        cash_flows: Sequence[CashFlow],
        initial_guess: float = XIRR_INITIAL_GUESS,
        max_iterations: int = XIRR_MAX_ITERATIONS,
        tolerance: float = XIRR_TOLERANCE,
) -> Decimal:
    """
    Calculate the Extended Internal Rate of Return (XIRR).

    The discount rate that sets the net present value of the cash flows to
    zero, annualized on a 365-day year and measured from the earliest flow.

    Args:
        cash_flows: Dated signed amounts (any order; sorted internally)
        initial_guess: Starting rate as a decimal (0.10 = 10%)
        max_iterations: Newton-Raphson iteration cap
        tolerance: Convergence threshold on the change in rate

    Returns:
        XIRR as a percentage (10.0 = 10% per year). 0 for fewer than two
        flows or a degenerate solver state; the last iterate when the solver
        does not converge.

    Example:
        cash_flows = [
            CashFlow(date(2024, 1, 1), Decimal("-1000")),
            CashFlow(date(2024, 12, 31), Decimal("1100")),
        ]
        calculate_xirr(cash_flows)  # 10.0 (365 days apart)
    """
    if len(cash_flows) < 2:
        return ZERO

    sorted_flows = sorted(cash_flows, key=lambda cf: cf.date)
    base_date = sorted_flows[0].date

    flows = [
        (_year_fraction(base_date, cf.date), float(cf.amount))
        for cf in sorted_flows
    ]

    rate = float(initial_guess)

    for iteration in range(max_iterations):
        base = 1 + rate
        if base <= 0:
            # (1 + r)^t is undefined for fractional t
            logger.warning(f"XIRR rate fell to {rate:.6f} (<= -100%), returning 0")
            return ZERO

        npv = 0.0
        npv_derivative = 0.0
        try:
            for years, amount in flows:
                npv += amount / base ** years
                npv_derivative -= years * amount / base ** (years + 1)
        except (OverflowError, ZeroDivisionError):
            logger.warning(f"XIRR overflow at rate {rate:.6f}, returning 0")
            return ZERO

        if npv_derivative == 0:
            logger.warning("XIRR derivative is zero, returning 0")
            return ZERO

        new_rate = rate - npv / npv_derivative

        if not math.isfinite(new_rate):
            logger.warning("XIRR produced a non-finite rate, returning 0")
            return ZERO

        if abs(new_rate - rate) < tolerance:
            logger.debug(f"XIRR converged after {iteration + 1} iterations")
            return _to_percent(new_rate)

        rate = new_rate

    logger.warning(
        f"XIRR did not converge after {max_iterations} iterations, "
        f"returning last rate {rate:.6f}"
    )
    return _to_percent(rate)


def calculate_portfolio_xirr(
        assets: Sequence[Asset],
        as_of: date | None = None,
        net_liabilities: bool = False,
) -> Decimal:
    """XIRR (percent) of an asset snapshot, see build_cash_flows for conventions."""
    return calculate_xirr(
        build_cash_flows(assets, as_of=as_of, net_liabilities=net_liabilities)
    )
