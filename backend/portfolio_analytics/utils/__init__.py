# backend/portfolio_analytics/utils/__init__.py
"""
Cross-cutting utilities:
- logging: Logging configuration with correlation ID support
- context: Request context (correlation ID)

Usage:
    from portfolio_analytics.utils import setup_logging, get_logger
    from portfolio_analytics.utils import get_correlation_id, set_correlation_id
"""

from portfolio_analytics.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from portfolio_analytics.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
