# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Mock price provider fixtures
- Price cache / price service fixtures
- Sample asset factories
- API test client with dependency overrides
"""

import itertools
import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator

import pytest
from fastapi.testclient import TestClient

from portfolio_analytics.dependencies import get_price_cache, get_price_service
from portfolio_analytics.middleware.rate_limit import limiter
from portfolio_analytics.services.analytics.types import Asset, AssetCategory
from portfolio_analytics.services.exceptions import SymbolNotFoundError
from portfolio_analytics.services.market_data.base import PriceProvider, PriceQuote
from portfolio_analytics.services.market_data.cache import InMemoryPriceCache
from portfolio_analytics.services.market_data.price_service import PriceService


# =============================================================================
# MOCK PRICE PROVIDER
# =============================================================================

class MockPriceProvider(PriceProvider):
    """
    Mock implementation of PriceProvider for testing.

    Allows configuring quotes for specific symbols and simulating errors.
    Unknown symbols raise SymbolNotFoundError like a real provider.
    """

    def __init__(self, name: str = "mock"):
        self._name = name
        self._quotes: dict[str, PriceQuote] = {}
        self._errors: dict[str, Exception] = {}
        self._batch_error: Exception | None = None
        self._call_count: dict[str, int] = {"single": 0, "batch": 0}
        self._history: dict[tuple[str, str], list[tuple[date, Decimal]]] = {}
        self.requested: list[str] = []
        self.history_requests: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    def add_quote(
            self,
            symbol: str,
            price: str | Decimal,
            change_percent: str | Decimal | None = None,
    ) -> PriceQuote:
        """Configure a successful quote for a symbol."""
        quote = PriceQuote(
            symbol=symbol,
            price=Decimal(price),
            change_percent=Decimal(change_percent) if change_percent is not None else None,
            source=self._name,
        )
        self._quotes[symbol] = quote
        return quote

    def add_history(
            self,
            symbol: str,
            closes: Iterable[tuple[date, str]],
            period: str = "1mo",
    ) -> None:
        """Configure daily closes returned for a symbol and period."""
        self._history[(symbol, period)] = [(d, Decimal(c)) for d, c in closes]

    def add_error(self, symbol: str, error: Exception) -> None:
        """Configure an error for a symbol."""
        self._errors[symbol] = error

    def fail_batches(self, error: Exception) -> None:
        """Make every get_quotes call raise."""
        self._batch_error = error

    @property
    def single_call_count(self) -> int:
        return self._call_count["single"]

    @property
    def batch_call_count(self) -> int:
        return self._call_count["batch"]

    def get_quote(self, symbol: str) -> PriceQuote:
        self._call_count["single"] += 1
        self.requested.append(symbol)

        if symbol in self._errors:
            raise self._errors[symbol]
        if symbol in self._quotes:
            return self._quotes[symbol]
        raise SymbolNotFoundError(symbol=symbol, provider=self.name)

    def get_quotes(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        self._call_count["batch"] += 1
        symbols = list(symbols)
        self.requested.extend(symbols)

        if self._batch_error is not None:
            raise self._batch_error
        return {s: self._quotes[s] for s in symbols if s in self._quotes}

    def get_historical_prices(
            self,
            symbol: str,
            period: str,
    ) -> list[tuple[date, Decimal]]:
        self.history_requests.append((symbol, period))

        if symbol in self._errors:
            raise self._errors[symbol]
        if (symbol, period) in self._history:
            return list(self._history[(symbol, period)])
        raise SymbolNotFoundError(symbol=symbol, provider=self.name)


@pytest.fixture
def stock_provider() -> MockPriceProvider:
    """Mock standing in for Yahoo Finance."""
    return MockPriceProvider(name="yahoo")


@pytest.fixture
def crypto_provider() -> MockPriceProvider:
    """Mock standing in for CoinGecko."""
    return MockPriceProvider(name="coingecko")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def price_cache(clock: FakeClock) -> InMemoryPriceCache:
    return InMemoryPriceCache(clock=clock)


@pytest.fixture
def price_service(
        stock_provider: MockPriceProvider,
        crypto_provider: MockPriceProvider,
        price_cache: InMemoryPriceCache,
) -> PriceService:
    return PriceService(
        stock_provider=stock_provider,
        crypto_provider=crypto_provider,
        cache=price_cache,
        ttl_seconds=60,
    )


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

_asset_ids = itertools.count(1)


def make_asset(
        category: AssetCategory | str = AssetCategory.STOCKS,
        quantity: str | Decimal = "1",
        purchase_price: str | Decimal = "100",
        current_price: str | Decimal | None = None,
        purchase_date: date | None = None,
        id: str | None = None,
        **fields,
) -> Asset:
    """Build an Asset from short string amounts."""
    return Asset(
        id=id or f"asset-{next(_asset_ids)}",
        category=AssetCategory.parse(category),
        quantity=Decimal(quantity),
        purchase_price=Decimal(purchase_price),
        current_price=Decimal(current_price) if current_price is not None else None,
        purchase_date=purchase_date,
        **fields,
    )


@pytest.fixture
def sample_portfolio() -> list[Asset]:
    """
    Stocks plus an interest-bearing cash account.

    total value 33925, invested 32500, passive income 800
    """
    return [
        make_asset(
            AssetCategory.STOCKS,
            quantity="50",
            purchase_price="150",
            current_price="178.5",
            purchase_date=date(2023, 1, 15),
            symbol="AAPL",
            id="aapl",
        ),
        make_asset(
            AssetCategory.CASH,
            quantity="25000",
            purchase_price="1",
            current_price="1",
            purchase_date=date(2023, 6, 1),
            interest_rate=Decimal("3.2"),
            id="savings",
        ),
    ]


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def client(
        price_service: PriceService,
        price_cache: InMemoryPriceCache,
) -> Iterator[TestClient]:
    """
    Test client with the price service wired to mock providers.

    Rate limiting is disabled so tests can hit the same route repeatedly.
    """
    from portfolio_analytics.main import app

    app.dependency_overrides[get_price_service] = lambda: price_service
    app.dependency_overrides[get_price_cache] = lambda: price_cache
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    limiter.enabled = True
    app.dependency_overrides.clear()
