# backend/portfolio_performance/middleware/__init__.py
"""
ASGI middleware for the analytics API.

Usage:
    from portfolio_performance.middleware import CorrelationIdMiddleware

    app.add_middleware(CorrelationIdMiddleware)
"""

from portfolio_performance.middleware.correlation import CorrelationIdMiddleware

__all__ = [
    "CorrelationIdMiddleware",
]
