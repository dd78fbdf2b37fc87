# backend/portfolio_analytics/schemas/assets.py
"""
Pydantic schemas for asset snapshots posted to the API.

Assets arrive from a persistence layer or a UI, so several spellings are
accepted for the same field:
- `category` may also be sent as `asset_type` or `assetType`
- camelCase keys (`purchasePrice`, `currentPrice`, `purchaseDate`,
  `interestRate`, `dividendYield`, `isLiability`) map to snake_case fields

Validation layers:
- Field constraints: type, non-negative quantity and prices
- Field validators: normalization (trim, uppercase currency)
- to_domain(): category resolution and liability flag folding
  (raises UnsupportedCategoryError / ValidationError)
"""

from datetime import date
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from portfolio_analytics.services.analytics.types import Asset
from portfolio_analytics.services.constants import MAX_ASSETS_PER_REQUEST


class AssetIn(BaseModel):
    """
    One holding or liability as sent by a client.

    The liability flag is optional: when present it is folded into the
    category (true -> liabilities, false with category liabilities -> 400).
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [{
                "id": "1",
                "category": "stocks",
                "symbol": "AAPL",
                "quantity": "50",
                "purchase_price": "150",
                "current_price": "178.5",
                "purchase_date": "2023-01-15",
                "dividend_yield": "0.5",
            }]
        },
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, unique within the snapshot"
    )
    category: str = Field(
        ...,
        validation_alias=AliasChoices("category", "asset_type", "assetType"),
        examples=["stocks", "crypto", "liabilities"],
        description="Asset category"
    )
    quantity: Decimal = Field(
        ...,
        ge=0,
        description="Units held"
    )
    purchase_price: Decimal = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("purchase_price", "purchasePrice"),
        description="Unit cost at acquisition"
    )
    current_price: Decimal | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("current_price", "currentPrice"),
        description="Live unit price (purchase price is used when missing)"
    )
    purchase_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("purchase_date", "purchaseDate"),
        description="Acquisition date (valuation date is used when missing)"
    )
    interest_rate: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("interest_rate", "interestRate"),
        description="Annual interest in percent"
    )
    dividend_yield: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("dividend_yield", "dividendYield"),
        description="Annual dividend yield in percent"
    )
    is_liability: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("is_liability", "isLiability"),
        description="Redundant liability flag, folded into the category"
    )
    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 code (display only, no conversion)"
    )
    name: str | None = Field(default=None, max_length=255)
    symbol: str | None = Field(
        default=None,
        max_length=50,
        description="Ticker or coin id for live price lookups"
    )

    # =========================================================================
    # FIELD VALIDATORS (Normalization)
    # =========================================================================

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: object) -> object:
        """Accept numeric ids from persistence layers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('category')
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, v: object) -> object:
        """Normalize currency before the length check: trim whitespace and uppercase."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('name', 'symbol')
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    def to_domain(self) -> Asset:
        """
        Convert to the engine's Asset.

        Raises:
            UnsupportedCategoryError: Unknown category
            ValidationError: Liability flag contradicts the category
        """
        return Asset.from_record(
            id=self.id,
            category=self.category,
            quantity=self.quantity,
            purchase_price=self.purchase_price,
            is_liability=self.is_liability,
            current_price=self.current_price,
            purchase_date=self.purchase_date,
            interest_rate=self.interest_rate,
            dividend_yield=self.dividend_yield,
            currency=self.currency,
            name=self.name,
            symbol=self.symbol,
        )


class AssetSnapshotRequest(BaseModel):
    """Request body carrying an asset snapshot."""

    assets: list[AssetIn] = Field(
        default_factory=list,
        max_length=MAX_ASSETS_PER_REQUEST,
        description="Holdings and liabilities (may be empty)"
    )

    def to_domain(self) -> list[Asset]:
        return [asset.to_domain() for asset in self.assets]


class AssetOut(BaseModel):
    """
    Asset as returned by the API (e.g. after a price refresh).

    Numeric values are strings to preserve Decimal precision.
    """

    id: str
    category: str
    quantity: str
    purchase_price: str
    current_price: str | None = None
    purchase_date: date | None = None
    interest_rate: str | None = None
    dividend_yield: str | None = None
    currency: str
    name: str | None = None
    symbol: str | None = None
    is_liability: bool
