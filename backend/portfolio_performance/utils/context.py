# backend/portfolio_performance/utils/context.py
"""
Request-scoped context for the analytics API.

Holds the correlation ID of the request being served so that log records
emitted anywhere below the router (engine, repositories) can be tied back
to it. Backed by contextvars, so each request (thread or task) sees its own
value.
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current request, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context (called by middleware)."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)
