# backend/portfolio_performance/utils/__init__.py
"""
Cross-cutting utilities: logging setup and request context.

Usage:
    from portfolio_performance.utils import setup_logging, get_correlation_id
"""

from portfolio_performance.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from portfolio_performance.utils.logging import setup_logging

__all__ = [
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
