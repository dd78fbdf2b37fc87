# backend/portfolio_analytics/schemas/prices.py
"""
Pydantic schemas for the live price endpoints.

Prices are strings to preserve Decimal precision.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from portfolio_analytics.schemas.assets import AssetOut, AssetSnapshotRequest


class PriceQuoteResponse(BaseModel):
    """Live quote of one symbol."""

    symbol: str = Field(..., description="Symbol as resolved (e.g. 'GC=F', 'bitcoin')")
    price: str
    change: str | None = Field(None, description="Absolute change vs previous close")
    change_percent: str | None = Field(None, description="Percent change vs previous close / 24h")
    timestamp: datetime = Field(..., description="Fetch time (UTC)")
    source: Literal["yahoo", "coingecko", "cache"]


class RefreshRequest(AssetSnapshotRequest):
    """Asset snapshot plus optional per-asset symbol overrides."""

    symbols: dict[str, str] = Field(
        default_factory=dict,
        description="Asset id -> symbol, overriding the asset's own symbol"
    )


class RefreshResponse(BaseModel):
    """Assets with refreshed current prices, in input order."""

    assets: list[AssetOut]
    refreshed: int = Field(..., description="Number of assets that received a live quote")
