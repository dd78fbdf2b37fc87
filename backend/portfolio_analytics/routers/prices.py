# backend/portfolio_analytics/routers/prices.py
"""
Live price endpoints.

- GET  /prices/{category}/{symbol}  - Live quote (stocks, crypto, gold, silver, commodity)
- POST /prices/refresh              - Asset snapshot with refreshed current prices

Provider failures never surface as errors here: PriceService turns them
into "no quote", which is a 404 for the single lookup and an unchanged
asset for the refresh.
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from portfolio_analytics.dependencies import get_price_service
from portfolio_analytics.middleware.rate_limit import limiter, RATE_LIMIT_PRICES
from portfolio_analytics.schemas.assets import AssetOut
from portfolio_analytics.schemas.prices import (
    PriceQuoteResponse,
    RefreshRequest,
    RefreshResponse,
)
from portfolio_analytics.services.analytics import Asset
from portfolio_analytics.services.market_data import PriceQuote, PriceService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/prices",
    tags=["Prices"],
)


def _decimal_to_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return format(value.normalize(), "f")


def _map_quote(quote: PriceQuote) -> PriceQuoteResponse:
    return PriceQuoteResponse(
        symbol=quote.symbol,
        price=_decimal_to_str(quote.price),
        change=_decimal_to_str(quote.change),
        change_percent=_decimal_to_str(quote.change_percent),
        timestamp=quote.timestamp,
        source=quote.source,
    )


def _map_asset(asset: Asset) -> AssetOut:
    return AssetOut(
        id=asset.id,
        category=asset.category.value,
        quantity=_decimal_to_str(asset.quantity),
        purchase_price=_decimal_to_str(asset.purchase_price),
        current_price=_decimal_to_str(asset.current_price),
        purchase_date=asset.purchase_date,
        interest_rate=_decimal_to_str(asset.interest_rate),
        dividend_yield=_decimal_to_str(asset.dividend_yield),
        currency=asset.currency,
        name=asset.name,
        symbol=asset.symbol,
        is_liability=asset.is_liability,
    )


@router.get(
    "/{category}/{symbol}",
    response_model=PriceQuoteResponse,
    summary="Get a live quote",
)
@limiter.limit(RATE_LIMIT_PRICES)
def get_price(
        request: Request,  # Required for rate limiting
        category: str = Path(..., max_length=32, examples=["stocks", "crypto", "gold"]),
        symbol: str = Path(..., max_length=50, examples=["AAPL", "BTC", "crude oil"]),
        service: PriceService = Depends(get_price_service),
) -> PriceQuoteResponse:
    """
    Live quote for a symbol.

    For gold and silver the symbol is ignored (futures GC=F / SI=F are used).
    For commodities the symbol is a commodity name ("platinum", "crude oil").

    Returns 404 when the category has no price source, the symbol is
    unknown, or the provider is currently unreachable.
    """
    quote = service.get_price(category, symbol)
    if quote is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No price available for {category}/{symbol}",
        )
    return _map_quote(quote)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh current prices of an asset snapshot",
)
@limiter.limit(RATE_LIMIT_PRICES)
def refresh_prices(
        request: Request,
        payload: RefreshRequest,
        service: PriceService = Depends(get_price_service),
) -> RefreshResponse:
    """
    Return the posted assets with `current_price` replaced by live quotes.

    Assets without a quote (no symbol, unsupported category, provider
    failure) are returned unchanged.
    """
    assets = payload.to_domain()
    refreshed = service.refresh_assets(assets, symbols=payload.symbols)

    return RefreshResponse(
        assets=[_map_asset(a) for a in refreshed],
        refreshed=sum(1 for before, after in zip(assets, refreshed) if before is not after),
    )
