# backend/portfolio_analytics/services/analytics/benchmark.py
"""
Portfolio vs benchmark growth comparison.

Normalizes a net worth history and a benchmark price series to cumulative
growth since their first observation, so both can be charted on one axis.

Formula:
    growth_t = (value_t / value_0 - 1) × 100

Benchmark alignment:
    For each portfolio date the benchmark price on the same date is used.
    When the benchmark has no price for that date, its LAST price is used
    (the benchmark series is usually shorter than the portfolio history).
    An empty benchmark series yields 0 growth.

Edge cases:
    - Fewer than 2 portfolio observations: empty result
    - A first value of 0 (portfolio or benchmark): growth 0
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Sequence

from portfolio_analytics.services.analytics.types import GrowthPoint
from portfolio_analytics.services.constants import HUNDRED, ZERO

logger = logging.getLogger(__name__)

# (date, value) pairs in ascending date order
Series = Sequence[tuple[date, Decimal]]


def _growth(value: Decimal, first: Decimal) -> Decimal:
    if first == ZERO:
        return ZERO
    return (value / first - 1) * HUNDRED


def compare_growth(history: Series, benchmark: Series) -> list[GrowthPoint]:
    """
    Cumulative growth of a portfolio and a benchmark, point by point.

    Args:
        history: Portfolio net worth observations, ascending by date
        benchmark: Benchmark prices, ascending by date (may be empty)

    Returns:
        One GrowthPoint per history observation, or [] when the history has
        fewer than two observations

    Example:
        history = [(date(2024, 1, 1), Decimal("100")), (date(2024, 2, 1), Decimal("110"))]
        benchmark = [(date(2024, 1, 1), Decimal("400")), (date(2024, 2, 1), Decimal("420"))]
        compare_growth(history, benchmark)
        # [GrowthPoint(2024-01-01, 0, 0), GrowthPoint(2024-02-01, 10, 5)]
    """
    if len(history) < 2:
        return []

    first_value = history[0][1]

    benchmark_by_date = {day: price for day, price in benchmark}
    first_benchmark = benchmark[0][1] if benchmark else ZERO
    last_benchmark = benchmark[-1][1] if benchmark else None

    points: list[GrowthPoint] = []
    for day, value in history:
        benchmark_price = benchmark_by_date.get(day, last_benchmark)

        if benchmark_price is None:
            benchmark_growth = ZERO
        else:
            benchmark_growth = _growth(benchmark_price, first_benchmark)

        points.append(GrowthPoint(
            date=day,
            portfolio=_growth(value, first_value),
            benchmark=benchmark_growth,
        ))

    logger.debug(
        f"Compared {len(history)} portfolio points against "
        f"{len(benchmark)} benchmark prices"
    )
    return points
