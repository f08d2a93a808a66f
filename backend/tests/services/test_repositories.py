# backend/tests/services/test_repositories.py
"""
Integration tests for the SQLAlchemy repositories.

Uses in-memory SQLite via the session_factory fixture.

Test Coverage:
- SqlPortfolioValuationProvider: range filtering and ordering
- SqlBenchmarkPriceProvider: prices, info, active listing
- SqlRiskFreeRateStore: latest rate on or before a date
- SqlPerformanceMetricsStore: upsert on (calculation_date, benchmark_id)
- Engine wired to the repositories end to end
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from portfolio_performance.models import (
    BenchmarkIndex,
    BenchmarkPrice,
    PerformanceMetricsRecord,
    PortfolioValuation,
    RiskFreeRateRecord,
)
from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.analytics.types import BenchmarkInfo, PerformanceMetrics
from portfolio_performance.services.repositories import (
    SqlBenchmarkPriceProvider,
    SqlPerformanceMetricsStore,
    SqlPortfolioValuationProvider,
    SqlRiskFreeRateStore,
)
from tests.fakes import values_from_returns, wavy_returns

START = date(2024, 1, 1)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def seeded_db(db):
    """60 days of portfolio values, two benchmarks (one inactive), AR rates."""
    portfolio = values_from_returns(1000.0, wavy_returns(60))
    benchmark = values_from_returns(400.0, wavy_returns(60, amplitude=0.7, drift=0.02))

    merval = BenchmarkIndex(symbol="MERV", name="Merval")
    retired = BenchmarkIndex(symbol="OLD", name="Retired index", is_active=False)
    db.add_all([merval, retired])
    db.flush()

    for i, (pv, bv) in enumerate(zip(portfolio, benchmark)):
        day = START + timedelta(days=i)
        db.add(PortfolioValuation(date=day, total_value=Decimal(str(round(pv, 6)))))
        db.add(BenchmarkPrice(benchmark_id=merval.id, date=day, close_price=Decimal(str(round(bv, 6)))))

    db.add_all([
        RiskFreeRateRecord(country="AR", recorded_date=date(2023, 12, 1), annual_rate=Decimal("90.0"), daily_rate=Decimal("0.2466")),
        RiskFreeRateRecord(country="AR", recorded_date=date(2024, 2, 1), annual_rate=Decimal("70.0"), daily_rate=Decimal("0.1918")),
        RiskFreeRateRecord(country="US", recorded_date=date(2024, 1, 15), annual_rate=Decimal("5.25"), daily_rate=Decimal("0.0144")),
    ])
    db.commit()
    return {"merval_id": merval.id, "retired_id": retired.id}


def _metrics(calculation_date: date, benchmark_id: int | None = None, **overrides) -> PerformanceMetrics:
    values = dict(
        calculation_date=calculation_date,
        benchmark_id=benchmark_id,
        period_days=30,
        portfolio_return=0.02,
        portfolio_volatility=12.0,
        sharpe_ratio=0.8,
        sortino_ratio=1.1,
        calmar_ratio=2.0,
        tracking_error=0.0,
        max_drawdown=4.5,
        var_95=-1.8,
        var_99=-2.6,
    )
    values.update(overrides)
    return PerformanceMetrics(**values)


# =============================================================================
# READ-SIDE PROVIDERS
# =============================================================================

class TestSqlPortfolioValuationProvider:
    """Tests for SqlPortfolioValuationProvider."""

    def test_range_is_inclusive_and_ordered(self, session_factory, seeded_db):
        provider = SqlPortfolioValuationProvider(session_factory)

        points = provider.get_historical_values(date(2024, 1, 10), date(2024, 1, 20))

        assert len(points) == 11
        assert points[0].date == date(2024, 1, 10)
        assert points[-1].date == date(2024, 1, 20)
        assert isinstance(points[0].total_value, Decimal)

    def test_empty_range(self, session_factory, seeded_db):
        provider = SqlPortfolioValuationProvider(session_factory)
        assert provider.get_historical_values(date(2020, 1, 1), date(2020, 2, 1)) == []


class TestSqlBenchmarkPriceProvider:
    """Tests for SqlBenchmarkPriceProvider."""

    def test_get_range(self, session_factory, seeded_db):
        provider = SqlBenchmarkPriceProvider(session_factory)

        prices = provider.get_range(seeded_db["merval_id"], START, START + timedelta(days=9))

        assert len(prices) == 10
        assert prices == sorted(prices, key=lambda p: p.date)

    def test_get_range_other_benchmark(self, session_factory, seeded_db):
        provider = SqlBenchmarkPriceProvider(session_factory)
        assert provider.get_range(seeded_db["retired_id"], START, START + timedelta(days=9)) == []

    def test_get_info(self, session_factory, seeded_db):
        provider = SqlBenchmarkPriceProvider(session_factory)

        info = provider.get_info(seeded_db["merval_id"])

        assert info == BenchmarkInfo(id=seeded_db["merval_id"], symbol="MERV", name="Merval")

    def test_get_info_unknown(self, session_factory, seeded_db):
        assert SqlBenchmarkPriceProvider(session_factory).get_info(9999) is None

    def test_list_active(self, session_factory, seeded_db):
        active = SqlBenchmarkPriceProvider(session_factory).list_active()
        assert [b.symbol for b in active] == ["MERV"]


class TestSqlRiskFreeRateStore:
    """Tests for SqlRiskFreeRateStore."""

    def test_latest_on_or_before(self, session_factory, seeded_db):
        store = SqlRiskFreeRateStore(session_factory)

        assert store.lookup(date(2024, 1, 20), "AR").annual_rate == 90.0
        assert store.lookup(date(2024, 2, 1), "AR").annual_rate == 70.0
        assert store.lookup(date(2024, 6, 1), "AR").annual_rate == 70.0

    def test_filters_by_country(self, session_factory, seeded_db):
        record = SqlRiskFreeRateStore(session_factory).lookup(date(2024, 2, 1), "US")

        assert record.annual_rate == 5.25
        assert record.recorded_date == date(2024, 1, 15)

    def test_nothing_recorded_yet(self, session_factory, seeded_db):
        assert SqlRiskFreeRateStore(session_factory).lookup(date(2023, 1, 1), "AR") is None


# =============================================================================
# METRICS STORE
# =============================================================================

class TestSqlPerformanceMetricsStore:
    """Tests for SqlPerformanceMetricsStore."""

    def test_insert_and_get(self, session_factory, db):
        store = SqlPerformanceMetricsStore(session_factory)

        store.upsert(_metrics(date(2024, 3, 1)))

        assert store.get(date(2024, 3, 1)) == _metrics(date(2024, 3, 1))

    def test_upsert_replaces_standalone_record(self, session_factory, db):
        """Records without a benchmark are matched with IS NULL."""
        store = SqlPerformanceMetricsStore(session_factory)

        store.upsert(_metrics(date(2024, 3, 1), sharpe_ratio=0.5))
        store.upsert(_metrics(date(2024, 3, 1), sharpe_ratio=0.9))

        assert db.query(PerformanceMetricsRecord).count() == 1
        assert store.get(date(2024, 3, 1)).sharpe_ratio == 0.9

    def test_benchmark_records_are_separate(self, session_factory, db, seeded_db):
        store = SqlPerformanceMetricsStore(session_factory)
        merval_id = seeded_db["merval_id"]

        store.upsert(_metrics(date(2024, 3, 1)))
        store.upsert(_metrics(date(2024, 3, 1), merval_id, beta=1.2, alpha=0.4))
        store.upsert(_metrics(date(2024, 3, 1), merval_id, beta=1.3, alpha=0.4))

        assert db.query(PerformanceMetricsRecord).count() == 2
        assert store.get(date(2024, 3, 1), merval_id).beta == 1.3
        assert store.get(date(2024, 3, 1)).beta is None

    def test_get_missing(self, session_factory, db):
        assert SqlPerformanceMetricsStore(session_factory).get(date(2024, 3, 1)) is None


# =============================================================================
# END TO END
# =============================================================================

class TestEngineWithRepositories:
    """The engine wired to the SQL repositories."""

    @pytest.fixture
    def sql_engine(self, session_factory) -> PerformanceAnalysisEngine:
        return PerformanceAnalysisEngine(
            valuation_provider=SqlPortfolioValuationProvider(session_factory),
            benchmark_provider=SqlBenchmarkPriceProvider(session_factory),
            risk_free_provider=RiskFreeRateProvider(SqlRiskFreeRateStore(session_factory), "AR", 85.0, 0.2329),
            metrics_store=SqlPerformanceMetricsStore(session_factory),
        )

    def test_compare_and_store(self, sql_engine, session_factory, seeded_db):
        merval_id = seeded_db["merval_id"]
        end = START + timedelta(days=59)

        comparison = sql_engine.compare_with_benchmark(merval_id, START, end)
        metrics = sql_engine.comparison_to_metrics(comparison, merval_id, 59, end)
        sql_engine.save_performance_metrics(metrics)

        stored = SqlPerformanceMetricsStore(session_factory).get(end, merval_id)
        assert comparison.period.days == 59
        assert stored.beta == pytest.approx(comparison.comparison.beta)
        assert stored.excess_return == pytest.approx(comparison.comparison.excess_return)

    def test_period_update(self, sql_engine, session_factory, seeded_db):
        as_of = START + timedelta(days=59)

        summary = sql_engine.update_period_metrics(as_of=as_of, periods=((20, "20D"), (59, "2M")))

        assert [r.succeeded for r in summary.results] == [False, True]
        assert SqlPerformanceMetricsStore(session_factory).get(as_of, seeded_db["merval_id"]).period_days == 59
