# backend/portfolio_performance/services/protocols.py
"""
Protocol interfaces for the analytics engine's collaborators.

Using typing.Protocol enables structural subtyping:
- The SQLAlchemy repositories satisfy these without inheriting from them
- Test fakes work without explicit inheritance

Implementations may raise any exception on I/O failure; the engine wraps
it into ExternalDataError.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_performance.services.analytics.types import (
        BenchmarkInfo,
        PerformanceMetrics,
        PricePoint,
        RateRecord,
        ValuationPoint,
    )


class PortfolioValuationProvider(Protocol):
    """Source of daily total portfolio values."""

    def get_historical_values(self, start_date: date, end_date: date) -> list[ValuationPoint]:
        """Values with start_date <= date <= end_date, in any order."""
        ...


class BenchmarkPriceProvider(Protocol):
    """Source of benchmark metadata and closing prices."""

    def get_range(self, benchmark_id: int, start_date: date, end_date: date) -> list[PricePoint]:
        ...

    def get_info(self, benchmark_id: int) -> BenchmarkInfo | None:
        ...

    def list_active(self) -> list[BenchmarkInfo]:
        ...


class RiskFreeRateStore(Protocol):
    """Stored risk-free rate series."""

    def lookup(self, on_date: date, country: str) -> RateRecord | None:
        """Most recent record with recorded_date <= on_date, or None."""
        ...


class PerformanceMetricsStore(Protocol):
    """Persistence of computed metrics."""

    def upsert(self, metrics: PerformanceMetrics) -> None:
        """Insert or replace the record keyed by (calculation_date, benchmark_id)."""
        ...
