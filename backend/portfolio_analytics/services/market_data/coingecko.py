# backend/portfolio_analytics/services/market_data/coingecko.py
"""
CoinGecko price provider implementation.

Uses the public `/simple/price` endpoint (no API key) through httpx:

    GET {base_url}/simple/price?ids=bitcoin,ethereum
        &vs_currencies=usd&include_24hr_change=true

    {"bitcoin": {"usd": 64000.5, "usd_24h_change": 1.25}, ...}

Unknown coin ids are simply absent from the response body (HTTP 200).

Error mapping:
    429                     -> RateLimitError (Retry-After honoured)
    5xx, timeouts, network  -> ProviderUnavailableError
    other 4xx               -> MarketDataError (not retried)
    id missing from body    -> SymbolNotFoundError (single lookups only)
"""

import logging
from typing import Iterable

import httpx

from portfolio_analytics.services.exceptions import (
    MarketDataError,
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

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoPriceProvider(PriceProvider):
    """
    CoinGecko implementation of PriceProvider.

    Symbols are CoinGecko coin ids ("bitcoin", "ethereum"); they are
    lowercased before the request. Ticker shorthands (BTC, ETH) are resolved
    by PriceService, not here.

    Configuration:
        base_url: API root (default: public v3 API)
        vs_currency: Quote currency (default: "usd")
        timeout: Request timeout in seconds (default: 10)
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Example:
        provider = CoinGeckoPriceProvider()
        quote = provider.get_quote("bitcoin")
        quotes = provider.get_quotes(["bitcoin", "ethereum"])
    """

    def __init__(
            self,
            base_url: str = DEFAULT_BASE_URL,
            vs_currency: str = "usd",
            timeout: int = 10,
            transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._vs_currency = vs_currency.lower()
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info(
            f"CoinGeckoPriceProvider initialized "
            f"(base_url={base_url}, vs_currency={self._vs_currency}, timeout={timeout}s)"
        )

    @property
    def name(self) -> str:
        return "coingecko"

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_quote(self, symbol: str) -> PriceQuote:
        """
        Fetch the live quote of a single coin.

        Raises:
            SymbolNotFoundError: If CoinGecko does not know the coin id
            ProviderUnavailableError: If CoinGecko is unavailable
            RateLimitError: If the free-tier rate limit was hit
        """
        coin_id = symbol.strip().lower()
        quotes = self._execute_with_retry(self._fetch_quotes, [coin_id])

        quote = quotes.get(coin_id)
        if quote is None:
            raise SymbolNotFoundError(symbol=coin_id, provider=self.name)
        return quote

    def get_quotes(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        """
        Fetch several coins with one request.

        Unknown ids are left out of the result. Provider errors propagate.

        Returns:
            Dict mapping lowercased coin id to its quote
        """
        coin_ids = list(dict.fromkeys(s.strip().lower() for s in symbols))
        if not coin_ids:
            return {}
        return self._execute_with_retry(self._fetch_quotes, coin_ids)

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _fetch_quotes(self, coin_ids: list[str]) -> dict[str, PriceQuote]:
        """Internal method to fetch quotes (called by retry wrapper)."""
        logger.debug(f"Fetching CoinGecko quotes for {coin_ids}")

        params = {
            "ids": ",".join(coin_ids),
            "vs_currencies": self._vs_currency,
            "include_24hr_change": "true",
        }

        try:
            response = self._client.get("/simple/price", params=params)
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(provider=self.name, reason=f"timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"CoinGecko request failed: {e}")
            raise ProviderUnavailableError(provider=self.name, reason=str(e)) from e

        self._raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderUnavailableError(provider=self.name, reason="invalid JSON response") from e

        quotes: dict[str, PriceQuote] = {}
        for coin_id in coin_ids:
            coin_data = payload.get(coin_id)
            if not coin_data:
                logger.debug(f"CoinGecko has no data for {coin_id}")
                continue

            price = to_decimal(coin_data.get(self._vs_currency))
            if price is None:
                continue

            quotes[coin_id] = PriceQuote(
                symbol=coin_id,
                price=price,
                change_percent=to_decimal(coin_data.get(f"{self._vs_currency}_24h_change")),
                source="coingecko",
            )

        return quotes

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                provider=self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if status >= 500:
            raise ProviderUnavailableError(provider=self.name, reason=f"HTTP {status}")

        raise MarketDataError(
            f"CoinGecko rejected the request (HTTP {status})",
            provider=self.name,
        )
