# tests/test_database.py
"""
Tests for database setup.
"""

from datetime import date

from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from portfolio_performance.database import SessionLocal, init_db
from portfolio_performance.services.repositories import SqlPerformanceMetricsStore


class TestInitDb:
    """Tests for init_db."""

    def test_creates_all_tables(self):
        engine = create_engine("sqlite:///:memory:", poolclass=StaticPool)

        init_db(engine)

        assert set(inspect(engine).get_table_names()) == {
            "portfolio_valuations",
            "benchmark_indices",
            "benchmark_prices",
            "risk_free_rates",
            "performance_metrics",
        }

    def test_idempotent(self):
        engine = create_engine("sqlite:///:memory:", poolclass=StaticPool)

        init_db(engine)
        init_db(engine)

        assert "performance_metrics" in inspect(engine).get_table_names()

    def test_default_engine_is_usable(self):
        """The module engine (in-memory SQLite under test) works once initialized."""
        init_db()

        assert SqlPerformanceMetricsStore(SessionLocal).get(date(2000, 1, 1)) is None
