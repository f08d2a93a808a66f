# backend/portfolio_performance/routers/__init__.py
"""
API routers.

- performance: portfolio metrics, benchmark comparison, risk statistics
"""

from portfolio_performance.routers.performance import router as performance_router

__all__ = [
    "performance_router",
]
