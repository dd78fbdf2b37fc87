# backend/portfolio_analytics/services/constants.py
"""
Centralized constants for the analytics engine and its surrounding services.

Usage:
    from portfolio_analytics.services.constants import (
        CALENDAR_DAYS_PER_YEAR,
        XIRR_MAX_ITERATIONS,
        ZERO,
    )
"""

from decimal import Decimal


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Day count used to convert cash-flow date offsets into years for XIRR
CALENDAR_DAYS_PER_YEAR: int = 365


# =============================================================================
# XIRR SOLVER SETTINGS
# =============================================================================

# Starting rate for Newton-Raphson (10% annual return)
XIRR_INITIAL_GUESS: float = 0.10

# Iteration cap; the solver returns its last iterate when this is reached
XIRR_MAX_ITERATIONS: int = 100

# Convergence threshold on the absolute change of the rate between iterations
XIRR_TOLERANCE: float = 0.0001

# Quantum for the returned XIRR percentage
XIRR_PRECISION: Decimal = Decimal("0.00000001")


# =============================================================================
# DIVERSIFICATION SCORE
# =============================================================================

# Bounds of the 0-100 diversification score
SCORE_MIN: Decimal = Decimal("0")
SCORE_MAX: Decimal = Decimal("100")


# =============================================================================
# INSIGHT THRESHOLDS
# =============================================================================

# Diversification score above which the portfolio is "well diversified"
INSIGHT_EXCELLENT_DIVERSIFICATION: int = 70

# Diversification score above which the portfolio is "fairly diversified"
INSIGHT_FAIR_DIVERSIFICATION: int = 40

# Crypto share of total assets that triggers a volatility warning (20%)
INSIGHT_CRYPTO_RATIO: Decimal = Decimal("0.2")

# Debt-to-asset ratio that triggers a leverage warning (50%)
INSIGHT_DEBT_RATIO: Decimal = Decimal("0.5")


# =============================================================================
# RECOMMENDATION THRESHOLDS
# =============================================================================

# Stock allocation (percent) above which bonds are recommended
RECOMMEND_MAX_STOCK_PERCENT: Decimal = Decimal("70")

# Diversification score below which a broader spread is recommended
RECOMMEND_MIN_DIVERSIFICATION: Decimal = Decimal("30")


# =============================================================================
# MARKET DATA
# =============================================================================

# Default quote cache lifetime in seconds (overridable via settings)
PRICE_CACHE_TTL_SECONDS: int = 60

# Yahoo Finance futures symbols for precious metals and commodities
GOLD_SYMBOL: str = "GC=F"
SILVER_SYMBOL: str = "SI=F"

COMMODITY_SYMBOLS: dict[str, str] = {
    "gold": GOLD_SYMBOL,
    "silver": SILVER_SYMBOL,
    "platinum": "PL=F",
    "palladium": "PA=F",
    "oil": "CL=F",
    "crude oil": "CL=F",
    "natural gas": "NG=F",
}

# Ticker shorthand -> CoinGecko coin id. Unlisted symbols are used lowercased.
COINGECKO_COIN_IDS: dict[str, str] = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "XRP": "ripple",
    "DOGE": "dogecoin",
    "ADA": "cardano",
    "DOT": "polkadot",
    "MATIC": "matic-network",
    "LINK": "chainlink",
    "UNI": "uniswap",
}

# Benchmark used by the growth comparison when the caller posts none
BENCHMARK_SYMBOL: str = "SPY"
BENCHMARK_PERIOD: str = "1mo"

# Lookback periods accepted by Yahoo Finance history requests
HISTORY_PERIODS: tuple[str, ...] = (
    "5d", "1mo", "3mo", "6mo", "1y", "2y", "5y", "10y", "ytd", "max",
)


# =============================================================================
# DECIMAL PRECISION CONSTANTS
# =============================================================================

# Provider quotes: 8 decimal places (crypto prices can be tiny)
PRICE_PRECISION: Decimal = Decimal("0.00000001")


# =============================================================================
# UTILITY CONSTANTS
# =============================================================================

ZERO: Decimal = Decimal("0")
HUNDRED: Decimal = Decimal("100")


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

RATE_LIMIT_DEFAULT: str = "100/minute"

# Analytics requests are pure CPU work over the posted snapshot
RATE_LIMIT_ANALYTICS: str = "60/minute"

# Price lookups may reach external providers on a cache miss
RATE_LIMIT_PRICES: str = "30/minute"

RATE_LIMIT_HEALTH: str = "300/minute"


# =============================================================================
# RESOURCE LIMIT CONSTANTS
# =============================================================================

# Maximum assets accepted in a single analytics request
MAX_ASSETS_PER_REQUEST: int = 5000

# Maximum cash flows accepted in a single XIRR request
MAX_CASH_FLOWS_PER_REQUEST: int = 10000
