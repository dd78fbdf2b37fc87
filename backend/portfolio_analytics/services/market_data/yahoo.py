# backend/portfolio_analytics/services/market_data/yahoo.py
"""
Yahoo Finance price provider implementation.

This module implements the PriceProvider interface using the yfinance library.
Yahoo Finance is a free data source suitable for personal/educational use.
It covers stocks, ETFs and futures (gold GC=F, silver SI=F, oil CL=F, ...).

Quote fields come from `Ticker.fast_info`:
    price          = last_price
    change         = last_price - previous_close
    change_percent = change / previous_close × 100

Price history comes from `Ticker.history(period=..., interval="1d")`, one
(date, close) pair per trading day. It feeds the benchmark growth comparison.

Limitations:
- Rate limits (not officially documented, but exist)
- Data may be delayed (15-20 minutes for some markets)
"""

import logging
from datetime import date
from decimal import Decimal

import yfinance as yf

from portfolio_analytics.services.constants import HUNDRED, PRICE_PRECISION
from portfolio_analytics.services.exceptions import (
    ProviderUnavailableError,
    RateLimitError,
    SymbolNotFoundError,
)
from portfolio_analytics.services.market_data.base import (
    PriceProvider,
    PriceQuote,
    to_decimal,
)

logger = logging.getLogger(__name__)


class YahooPriceProvider(PriceProvider):
    """
    Yahoo Finance implementation of PriceProvider.

    Configuration:
        timeout: Request timeout in seconds for history requests (default: 10).
                 `fast_info` takes no timeout, so quotes use yfinance's own.

    Retry Behavior (inherited from PriceProvider):
        - Retries on ProviderUnavailableError and RateLimitError
        - Does NOT retry on SymbolNotFoundError (permanent failure)
        - Uses exponential backoff: 1s → 2s → 4s
        - Maximum 3 attempts (configurable via class attributes)

    Example:
        provider = YahooPriceProvider(timeout=15)
        quote = provider.get_quote("AAPL")
        print(quote.price, quote.change_percent)
        history = provider.get_historical_prices("SPY", "1mo")
    """

    def __init__(self, timeout: int = 10) -> None:
        """
        Initialize the Yahoo Finance provider.

        Args:
            timeout: History request timeout in seconds
        """
        self._timeout = timeout
        logger.info(f"YahooPriceProvider initialized (timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "yahoo"

    # =========================================================================
    # QUOTES
    # =========================================================================

    def get_quote(self, symbol: str) -> PriceQuote:
        """
        Fetch the live quote of a Yahoo symbol.

        Raises:
            SymbolNotFoundError: If Yahoo has no price for the symbol
            ProviderUnavailableError: If Yahoo Finance is unavailable
            RateLimitError: If Yahoo is throttling requests
        """
        return self._execute_with_retry(self._fetch_quote, symbol)

    def _fetch_quote(self, symbol: str) -> PriceQuote:
        """Internal method to fetch a quote (called by retry wrapper)."""
        symbol = symbol.strip().upper()
        logger.debug(f"Fetching Yahoo quote for {symbol}")

        try:
            fast_info = yf.Ticker(symbol).fast_info
            price = to_decimal(fast_info.last_price)
            previous_close = to_decimal(fast_info.previous_close)
        except Exception as e:
            raise self._classify_error(symbol, e) from e

        if price is None:
            raise SymbolNotFoundError(symbol=symbol, provider=self.name)

        change = None
        change_percent = None
        if previous_close:
            change = price - previous_close
            change_percent = (change / previous_close * HUNDRED).quantize(PRICE_PRECISION)

        return PriceQuote(
            symbol=symbol,
            price=price,
            change=change,
            change_percent=change_percent,
            source="yahoo",
        )

    # =========================================================================
    # PRICE HISTORY
    # =========================================================================

    def get_historical_prices(
            self,
            symbol: str,
            period: str,
    ) -> list[tuple[date, Decimal]]:
        """
        Daily closing prices of a Yahoo symbol over a lookback period.

        Args:
            symbol: Yahoo symbol (e.g., "SPY", "GC=F")
            period: yfinance period ("5d", "1mo", "1y", ...)

        Returns:
            (date, close) pairs ascending by date. Days without a close are
            skipped; an empty frame gives an empty list.

        Raises:
            SymbolNotFoundError: If Yahoo does not know the symbol
            ProviderUnavailableError: If Yahoo Finance is unavailable
            RateLimitError: If Yahoo is throttling requests
        """
        return self._execute_with_retry(self._fetch_historical_prices, symbol, period)

    def _fetch_historical_prices(
            self,
            symbol: str,
            period: str,
    ) -> list[tuple[date, Decimal]]:
        """Internal method to fetch price history (called by retry wrapper)."""
        symbol = symbol.strip().upper()
        logger.debug(f"Fetching {period} price history for {symbol}")

        try:
            df = yf.Ticker(symbol).history(
                period=period,
                interval="1d",
                auto_adjust=False,
                timeout=self._timeout,
            )
        except Exception as e:
            raise self._classify_error(symbol, e) from e

        if df.empty:
            logger.warning(f"No price history for {symbol} over {period}")
            return []

        prices: list[tuple[date, Decimal]] = []
        for idx, row in df.iterrows():
            close = to_decimal(row.get("Close"))
            if close is None:
                continue
            price_date = idx.date() if hasattr(idx, "date") else idx
            prices.append((price_date, close))

        prices.sort(key=lambda p: p[0])
        logger.debug(f"Fetched {len(prices)} days for {symbol}")
        return prices

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _classify_error(self, symbol: str, error: Exception) -> Exception:
        """Map a yfinance failure onto the market data exception hierarchy."""
        error_str = str(error).lower()
        if "not found" in error_str or "no data" in error_str or "delisted" in error_str:
            return SymbolNotFoundError(symbol=symbol, provider=self.name)
        if "rate limit" in error_str or "too many requests" in error_str:
            return RateLimitError(provider=self.name)

        logger.error(f"Yahoo Finance error for {symbol}: {error}")
        return ProviderUnavailableError(provider=self.name, reason=str(error))
