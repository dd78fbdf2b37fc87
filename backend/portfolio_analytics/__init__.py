# backend/portfolio_analytics/__init__.py
"""
Portfolio Analytics Engine.

Pure portfolio calculations (net worth, allocation, diversification,
passive income, XIRR) plus a FastAPI surface and a live price adapter.

Package layout:
    config.py        - Settings (pydantic-settings)
    dependencies.py  - Singleton services for FastAPI
    main.py          - FastAPI application
    middleware/      - Correlation ID, rate limiting
    routers/         - /analytics, /prices
    schemas/         - Request/response models
    services/        - Analytics engine and market data
    utils/           - Logging and request context
"""

__version__ = "0.1.0"
