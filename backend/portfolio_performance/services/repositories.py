# backend/portfolio_performance/services/repositories.py
"""
SQLAlchemy implementations of the analytics collaborator protocols.

Each repository takes a session factory and opens one short-lived session
per call, so the engine can be shared across requests and threads. Rows
are converted to the plain dataclasses in analytics.types before they
leave this module.

    SqlPortfolioValuationProvider -> PortfolioValuationProvider
    SqlBenchmarkPriceProvider     -> BenchmarkPriceProvider
    SqlRiskFreeRateStore          -> RiskFreeRateStore
    SqlPerformanceMetricsStore    -> PerformanceMetricsStore
"""

import logging
from dataclasses import asdict
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from portfolio_performance.models import (
    BenchmarkIndex,
    BenchmarkPrice,
    PerformanceMetricsRecord,
    PortfolioValuation,
    RiskFreeRateRecord,
)
from portfolio_performance.services.analytics.types import (
    BenchmarkInfo,
    PerformanceMetrics,
    PricePoint,
    RateRecord,
    ValuationPoint,
)

logger = logging.getLogger(__name__)


class _SessionRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory


# =============================================================================
# READ-SIDE PROVIDERS
# =============================================================================

class SqlPortfolioValuationProvider(_SessionRepository):

    def get_historical_values(self, start_date: date, end_date: date) -> list[ValuationPoint]:
        stmt = (
            select(PortfolioValuation)
            .where(
                PortfolioValuation.date >= start_date,
                PortfolioValuation.date <= end_date,
            )
            .order_by(PortfolioValuation.date)
        )
        with self._session_factory() as session:
            rows = session.execute(stmt).scalars().all()
            return [ValuationPoint(date=row.date, total_value=row.total_value) for row in rows]


class SqlBenchmarkPriceProvider(_SessionRepository):

    def get_range(self, benchmark_id: int, start_date: date, end_date: date) -> list[PricePoint]:
        stmt = (
            select(BenchmarkPrice)
            .where(
                BenchmarkPrice.benchmark_id == benchmark_id,
                BenchmarkPrice.date >= start_date,
                BenchmarkPrice.date <= end_date,
            )
            .order_by(BenchmarkPrice.date)
        )
        with self._session_factory() as session:
            rows = session.execute(stmt).scalars().all()
            return [PricePoint(date=row.date, close_price=row.close_price) for row in rows]

    def get_info(self, benchmark_id: int) -> BenchmarkInfo | None:
        with self._session_factory() as session:
            benchmark = session.get(BenchmarkIndex, benchmark_id)
            if benchmark is None:
                return None
            return BenchmarkInfo(id=benchmark.id, symbol=benchmark.symbol, name=benchmark.name)

    def list_active(self) -> list[BenchmarkInfo]:
        stmt = (
            select(BenchmarkIndex)
            .where(BenchmarkIndex.is_active.is_(True))
            .order_by(BenchmarkIndex.id)
        )
        with self._session_factory() as session:
            return [
                BenchmarkInfo(id=b.id, symbol=b.symbol, name=b.name)
                for b in session.execute(stmt).scalars().all()
            ]


class SqlRiskFreeRateStore(_SessionRepository):

    def lookup(self, on_date: date, country: str) -> RateRecord | None:
        """Latest rate recorded on or before on_date for the country."""
        stmt = (
            select(RiskFreeRateRecord)
            .where(
                RiskFreeRateRecord.country == country,
                RiskFreeRateRecord.recorded_date <= on_date,
            )
            .order_by(RiskFreeRateRecord.recorded_date.desc())
            .limit(1)
        )
        with self._session_factory() as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                return None
            return RateRecord(
                recorded_date=row.recorded_date,
                annual_rate=float(row.annual_rate),
                daily_rate=float(row.daily_rate),
            )


# =============================================================================
# METRICS STORE
# =============================================================================

def _select_by_key(calculation_date: date, benchmark_id: int | None):
    # "= NULL" never matches, so the NULL benchmark needs IS NULL
    if benchmark_id is None:
        benchmark_clause = PerformanceMetricsRecord.benchmark_id.is_(None)
    else:
        benchmark_clause = PerformanceMetricsRecord.benchmark_id == benchmark_id

    return select(PerformanceMetricsRecord).where(
        PerformanceMetricsRecord.calculation_date == calculation_date,
        benchmark_clause,
    )


class SqlPerformanceMetricsStore(_SessionRepository):

    def upsert(self, metrics: PerformanceMetrics) -> None:
        """
        Insert or replace the record for (calculation_date, benchmark_id).

        Select-then-write instead of a dialect-specific ON CONFLICT, because
        the key includes a nullable column.
        """
        stmt = _select_by_key(metrics.calculation_date, metrics.benchmark_id)
        values = asdict(metrics)

        with self._session_factory() as session:
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                session.add(PerformanceMetricsRecord(**values))
                action = "Inserted"
            else:
                for field_name, value in values.items():
                    setattr(record, field_name, value)
                action = "Updated"
            session.commit()

        logger.debug(
            f"{action} performance metrics for {metrics.calculation_date} "
            f"(benchmark={metrics.benchmark_id})"
        )

    def get(self, calculation_date: date, benchmark_id: int | None = None) -> PerformanceMetrics | None:
        """Load a stored record back as PerformanceMetrics."""
        stmt = _select_by_key(calculation_date, benchmark_id)
        with self._session_factory() as session:
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                return None
            return PerformanceMetrics(**{
                name: getattr(record, name)
                for name in PerformanceMetrics.__dataclass_fields__
            })
