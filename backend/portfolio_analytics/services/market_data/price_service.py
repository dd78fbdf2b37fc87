# backend/portfolio_analytics/services/market_data/price_service.py
"""
Price adapter between live providers and the analytics engine.

PriceService answers "what is this symbol worth now?" for an asset category
and refreshes `current_price` on asset snapshots before they are handed to
the engine.

Dispatch (category is case-insensitive):
    stocks, stock              -> Yahoo (symbol as given)
    crypto, cryptocurrency     -> CoinGecko (BTC/ETH shorthands resolved)
    gold                       -> Yahoo GC=F
    silver                     -> Yahoo SI=F
    commodity, commodities     -> Yahoo via COMMODITY_SYMBOLS (name -> future)
    anything else              -> None

Failure policy:
    Provider errors are logged and turned into None. A missing quote never
    breaks a metrics request: the asset keeps its previous current_price, or
    the engine falls back to purchase_price.

Caching:
    Quotes are cached under "{provider}:{symbol}" for `ttl_seconds`
    (default 60). Cached hits carry source="cache".

History:
    get_historical_prices returns daily closes from Yahoo (SPY over one
    month by default) for the benchmark growth comparison. It is not cached.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from portfolio_analytics.services.analytics.types import Asset
from portfolio_analytics.services.constants import (
    BENCHMARK_PERIOD,
    BENCHMARK_SYMBOL,
    COINGECKO_COIN_IDS,
    COMMODITY_SYMBOLS,
    GOLD_SYMBOL,
    PRICE_CACHE_TTL_SECONDS,
    SILVER_SYMBOL,
)
from portfolio_analytics.services.exceptions import MarketDataError
from portfolio_analytics.services.market_data.base import PriceProvider, PriceQuote
from portfolio_analytics.services.market_data.cache import PriceCache

logger = logging.getLogger(__name__)

_STOCK_CATEGORIES = frozenset({"stocks", "stock"})
_CRYPTO_CATEGORIES = frozenset({"crypto", "cryptocurrency"})
_COMMODITY_CATEGORIES = frozenset({"commodity", "commodities"})


def resolve_coin_id(symbol: str) -> str:
    """Map a ticker shorthand (BTC) to a CoinGecko id (bitcoin)."""
    symbol = symbol.strip()
    return COINGECKO_COIN_IDS.get(symbol.upper(), symbol.lower())


class PriceService:
    """
    Live price lookups with caching and provider dispatch.

    Dependencies are injected (see dependencies.py); tests pass mock
    providers and a fresh cache.
    """

    def __init__(
            self,
            stock_provider: PriceProvider,
            crypto_provider: PriceProvider,
            cache: PriceCache,
            ttl_seconds: int = PRICE_CACHE_TTL_SECONDS,
    ) -> None:
        self._stocks = stock_provider
        self._crypto = crypto_provider
        self._cache = cache
        self._ttl = ttl_seconds

    # =========================================================================
    # SINGLE LOOKUPS
    # =========================================================================

    def get_price(self, category: str, symbol: str) -> PriceQuote | None:
        """
        Live quote for a symbol of the given category.

        Args:
            category: Asset category or alias (see module docstring)
            symbol: Ticker, coin id / shorthand, or commodity name.
                    Ignored for gold and silver.

        Returns:
            PriceQuote, or None for unsupported categories, unknown
            commodities and provider failures
        """
        kind = category.strip().lower()

        if kind in _STOCK_CATEGORIES:
            return self.get_stock_price(symbol)
        if kind in _CRYPTO_CATEGORIES:
            return self.get_crypto_price(symbol)
        if kind == "gold":
            return self.get_stock_price(GOLD_SYMBOL)
        if kind == "silver":
            return self.get_stock_price(SILVER_SYMBOL)
        if kind in _COMMODITY_CATEGORIES:
            return self.get_commodity_price(symbol)

        logger.debug(f"No price source for category '{category}'")
        return None

    def get_stock_price(self, symbol: str) -> PriceQuote | None:
        """Yahoo quote for a stock, ETF or futures symbol."""
        return self._cached_quote(self._stocks, symbol.strip().upper())

    def get_crypto_price(self, symbol: str) -> PriceQuote | None:
        """CoinGecko quote for a coin id or ticker shorthand."""
        return self._cached_quote(self._crypto, resolve_coin_id(symbol))

    def get_commodity_price(self, commodity: str) -> PriceQuote | None:
        """Yahoo futures quote for a commodity name ("gold", "crude oil")."""
        symbol = COMMODITY_SYMBOLS.get(commodity.strip().lower())
        if symbol is None:
            logger.warning(f"Unknown commodity: {commodity}")
            return None
        return self.get_stock_price(symbol)

    # =========================================================================
    # BATCH LOOKUPS
    # =========================================================================

    def get_crypto_prices(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        """
        Quotes for several coins, using one provider call for the cache misses.

        Returns:
            Dict mapping each requested symbol (as given) to its quote.
            Symbols without a quote are left out.
        """
        coin_ids = {symbol: resolve_coin_id(symbol) for symbol in symbols}

        results: dict[str, PriceQuote] = {}
        uncached: list[str] = []
        for symbol, coin_id in coin_ids.items():
            cached = self._cache.get(self._cache_key(self._crypto, coin_id))
            if cached is not None:
                results[symbol] = cached
            elif coin_id not in uncached:
                uncached.append(coin_id)

        if not uncached:
            return results

        try:
            fetched = self._crypto.get_quotes(uncached)
        except MarketDataError as e:
            logger.warning(f"Batch crypto lookup failed for {uncached}: {e}")
            fetched = {}

        for coin_id, quote in fetched.items():
            self._cache.set(self._cache_key(self._crypto, coin_id), quote, self._ttl)

        for symbol, coin_id in coin_ids.items():
            if symbol not in results and coin_id in fetched:
                results[symbol] = fetched[coin_id]

        return results

    def refresh_assets(
            self,
            assets: Sequence[Asset],
            symbols: Mapping[str, str] | None = None,
    ) -> list[Asset]:
        """
        Return new asset snapshots carrying live prices.

        The symbol of an asset is taken from `symbols[asset.id]`, falling
        back to `asset.symbol`. Gold and silver need no symbol. Assets
        without a quote are returned unchanged; input assets are never
        mutated.

        Args:
            assets: Asset snapshot
            symbols: Optional asset id -> symbol overrides

        Returns:
            Assets in input order
        """
        symbols = symbols or {}

        def symbol_of(asset: Asset) -> str | None:
            return symbols.get(asset.id) or asset.symbol

        crypto_symbols = [
            symbol_of(a) for a in assets
            if a.category.value in _CRYPTO_CATEGORIES and symbol_of(a)
        ]
        crypto_quotes = self.get_crypto_prices(crypto_symbols) if crypto_symbols else {}

        refreshed: list[Asset] = []
        updated = 0
        for asset in assets:
            symbol = symbol_of(asset)
            category = asset.category.value

            if category in _CRYPTO_CATEGORIES:
                quote = crypto_quotes.get(symbol) if symbol else None
            elif category in _STOCK_CATEGORIES and not symbol:
                quote = None
            else:
                quote = self.get_price(category, symbol or "")

            if quote is None:
                refreshed.append(asset)
            else:
                refreshed.append(asset.with_price(quote.price))
                updated += 1

        logger.info(f"Refreshed prices for {updated}/{len(assets)} assets")
        return refreshed

    # =========================================================================
    # PRICE HISTORY
    # =========================================================================

    def get_historical_prices(
            self,
            symbol: str = BENCHMARK_SYMBOL,
            period: str = BENCHMARK_PERIOD,
    ) -> list[tuple[date, Decimal]]:
        """
        Daily closing prices of a Yahoo symbol, used as the growth benchmark.

        Returns:
            (date, close) pairs ascending by date, or an empty list when the
            provider fails (the comparison then reports 0 benchmark growth)
        """
        try:
            return self._stocks.get_historical_prices(symbol.strip().upper(), period)
        except MarketDataError as e:
            logger.warning(f"Price history lookup failed for {symbol} ({period}): {e}")
            return []

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _cache_key(provider: PriceProvider, symbol: str) -> str:
        return f"{provider.name}:{symbol}"

    def _cached_quote(self, provider: PriceProvider, symbol: str) -> PriceQuote | None:
        if not symbol:
            return None

        key = self._cache_key(provider, symbol)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            quote = provider.get_quote(symbol)
        except MarketDataError as e:
            logger.warning(f"Price lookup failed for {key}: {e}")
            return None

        self._cache.set(key, quote, self._ttl)
        return quote
