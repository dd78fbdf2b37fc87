# backend/portfolio_analytics/utils/context.py
"""
Request-scoped context for log correlation.

Stores the correlation ID of the request being served in a ContextVar so
that it follows the request through async/await and threadpool hops and can
be stamped onto every log record.

Usage:
    from portfolio_analytics.utils.context import get_correlation_id

    correlation_id = get_correlation_id()  # None outside a request
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None if not set."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current request (called by middleware)."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)
