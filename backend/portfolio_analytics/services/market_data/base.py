# backend/portfolio_analytics/services/market_data/base.py
"""
Abstract interface for live price providers.

This module defines the contract that all price providers must follow.
Using an abstract base class allows for:
- Easy addition of new providers (Alpha Vantage, exchange APIs, etc.)
- Mock implementations for testing
- Consistent retry behavior across all providers

The analytics engine never calls a provider. PriceService uses providers to
refresh `current_price` on asset snapshots before the engine runs.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Literal, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from portfolio_analytics.services.constants import PRICE_PRECISION
from portfolio_analytics.services.exceptions import (
    MarketDataError,
    ProviderUnavailableError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

# Type variable for generic return type in retry method
T = TypeVar('T')

QuoteSource = Literal["yahoo", "coingecko", "cache"]


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class PriceQuote:
    """
    Live price of one symbol.

    Attributes:
        symbol: Symbol as requested (ticker, futures symbol or coin id)
        price: Last traded price
        change: Absolute change vs previous close (None if unknown)
        change_percent: Percent change vs previous close / 24h (None if unknown)
        timestamp: When the quote was fetched (UTC)
        source: Provider name, or "cache" for a cached hit
    """
    symbol: str
    price: Decimal
    source: QuoteSource
    change: Decimal | None = None
    change_percent: Decimal | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol is required")

    def as_cached(self) -> "PriceQuote":
        """Copy of this quote marked as served from the cache."""
        return replace(self, source="cache")


def to_decimal(value: Any) -> Decimal | None:
    """Convert a provider number to Decimal, returning None for NaN/None."""
    if value is None:
        return None
    try:
        if math.isnan(float(value)):
            return None
        return Decimal(str(value)).quantize(PRICE_PRECISION)
    except (TypeError, ValueError, InvalidOperation):
        return None


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class PriceProvider(ABC):
    """
    Abstract base class for live price providers.

    Retry Behavior:
        The base class provides a `_execute_with_retry` method that implements
        exponential backoff retry logic. Subclasses can override the retry
        configuration by setting class attributes:

        - MAX_RETRY_ATTEMPTS: Total attempts (default: 3)
        - RETRY_MIN_WAIT: Minimum wait in seconds (default: 1)
        - RETRY_MAX_WAIT: Maximum wait in seconds (default: 10)
        - RETRY_MULTIPLIER: Exponential multiplier (default: 1)

    Retryable Exceptions:
        - ProviderUnavailableError: Network issues, timeouts, server errors
        - RateLimitError: API rate limit exceeded

    Non-Retryable Exceptions:
        - SymbolNotFoundError: Permanent failure (symbol doesn't exist)
    """

    # =========================================================================
    # RETRY CONFIGURATION (can be overridden by subclasses)
    # =========================================================================

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10
    RETRY_MULTIPLIER: int = 1

    # =========================================================================
    # ABSTRACT PROPERTIES AND METHODS
    # =========================================================================

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this provider.

        Used for logging, error messages and cache keys.

        Returns:
            Provider name (e.g., "yahoo", "coingecko")
        """
        pass

    @abstractmethod
    def get_quote(self, symbol: str) -> PriceQuote:
        """
        Fetch the live quote of a single symbol.

        Args:
            symbol: Provider-specific symbol

        Returns:
            PriceQuote with source set to the provider name

        Raises:
            SymbolNotFoundError: Symbol doesn't exist (not retryable)
            ProviderUnavailableError: Network or API error (retryable)
            RateLimitError: Rate limit exceeded (retryable)
        """
        pass

    def get_quotes(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        """
        Fetch quotes for several symbols.

        Default implementation loops over get_quote. Failed symbols are
        logged and left out of the result. Subclasses with a batch endpoint
        should override this.

        Returns:
            Dict mapping requested symbol to its quote
        """
        quotes: dict[str, PriceQuote] = {}
        for symbol in symbols:
            try:
                quotes[symbol] = self.get_quote(symbol)
            except MarketDataError as e:
                logger.warning(f"{self.name}: no quote for {symbol}: {e}")
        return quotes

    def get_historical_prices(
            self,
            symbol: str,
            period: str,
    ) -> list[tuple[date, Decimal]]:
        """
        Daily closing prices over a lookback period ("1mo", "1y", ...).

        Providers without price history keep this default.

        Returns:
            (date, close) pairs in ascending date order

        Raises:
            MarketDataError: If the provider has no history endpoint
        """
        raise MarketDataError(
            f"{self.name} does not provide price history",
            provider=self.name,
        )

    # =========================================================================
    # RETRY LOGIC
    # =========================================================================

    def _execute_with_retry(
            self,
            func: Callable[..., T],
            *args: Any,
            **kwargs: Any,
    ) -> T:
        """
        Execute a function with retry logic for transient failures.

        Uses exponential backoff for retryable exceptions:
        - ProviderUnavailableError
        - RateLimitError

        Does NOT retry on:
        - SymbolNotFoundError (permanent failure)
        - Other exceptions

        Raises:
            The last exception if all retries fail
        """

        @retry(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type((ProviderUnavailableError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner() -> T:
            return func(*args, **kwargs)

        return _inner()

    def close(self) -> None:
        """Release network resources. Default implementation does nothing."""
        return None
