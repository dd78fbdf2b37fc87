# backend/portfolio_analytics/config.py
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- LOG_LEVEL / LOG_FORMAT: Logging verbosity and output format
- PRICE_CACHE_TTL_SECONDS: Lifetime of cached market quotes
- PRICE_PROVIDER_TIMEOUT_SECONDS: Timeout for market data requests

The analytics engine itself takes no configuration: it is a set of pure
functions. Everything here configures the surrounding HTTP surface and the
price adapter that refreshes asset prices before the engine runs.

Usage:
    from portfolio_analytics.config import settings

    ttl = settings.price_cache_ttl_seconds
"""
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Single .env at the project root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - APP_NAME: Application name (default: "Portfolio Analytics Engine")
        - DEBUG: Enable debug mode (default: False)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Market data settings:
        - PRICE_CACHE_TTL_SECONDS: Quote cache lifetime (default: 60)
        - PRICE_PROVIDER_TIMEOUT_SECONDS: Provider request timeout (default: 10)
        - COINGECKO_BASE_URL: CoinGecko API root
        - COINGECKO_VS_CURRENCY: Quote currency for crypto prices (default: "usd")
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format (text for humans, json for aggregation)"
    )

    app_name: str = "Portfolio Analytics Engine"
    debug: bool = False

    # =========================================================================
    # MARKET DATA
    # =========================================================================
    price_cache_ttl_seconds: int = Field(
        default=60,
        ge=0,
        description="Seconds a fetched quote stays fresh in the price cache"
    )
    price_provider_timeout_seconds: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Timeout for a single market data request"
    )
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="Base URL of the CoinGecko public API"
    )
    coingecko_vs_currency: str = Field(
        default="usd",
        description="Currency crypto prices are quoted in"
    )

    # =========================================================================
    # RATE LIMITING
    # =========================================================================
    trust_proxy_headers: bool = Field(
        default=False,
        description="Trust X-Forwarded-For when keying rate limits (behind a load balancer)"
    )
    trusted_proxy_ips: list[str] = Field(
        default_factory=list,
        description="Proxy addresses whose X-Forwarded-For header is trusted"
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed CORS origins"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"],
        description="Allowed HTTP methods for CORS"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        description="Allowed HTTP headers for CORS"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_environment(self) -> "Settings":
        """Production must not run with debug enabled."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG must be disabled in the production environment."
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
