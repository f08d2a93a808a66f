# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database fixtures (in-memory SQLite, session factory for the repositories)
- Engine fixtures wired to in-memory fakes
- Sample series

Fakes and series factories live in tests/fakes.py.
"""

import os

# Settings are read at import time; pin the test environment first.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date
from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_performance.models import Base
from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.analytics.types import BenchmarkInfo, RateRecord
from tests.fakes import (
    FakeBenchmarkProvider,
    FakeMetricsStore,
    FakeRateStore,
    FakeValuationProvider,
    make_prices,
    make_valuations,
    values_from_returns,
    wavy_returns,
)


START = date(2024, 1, 1)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    """Session factory handed to the Sql* repositories."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory) -> Iterator[Session]:
    """Create a database session for seeding and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# ENGINE FIXTURES
# =============================================================================

@pytest.fixture
def rate_store() -> FakeRateStore:
    """Rate store holding a 5% annual rate from the start of 2024."""
    return FakeRateStore(RateRecord(recorded_date=START, annual_rate=5.0, daily_rate=0.0137))


@pytest.fixture
def risk_free_provider(rate_store) -> RiskFreeRateProvider:
    return RiskFreeRateProvider(
        store=rate_store,
        country="AR",
        fallback_annual_rate=85.0,
        fallback_daily_rate=0.2329,
    )


@pytest.fixture
def portfolio_returns() -> list[float]:
    """60 daily portfolio returns."""
    return wavy_returns(60, amplitude=1.0, drift=0.05)


@pytest.fixture
def valuation_provider(portfolio_returns) -> FakeValuationProvider:
    return FakeValuationProvider(make_valuations(START, values_from_returns(1000.0, portfolio_returns)))


@pytest.fixture
def benchmark_provider() -> FakeBenchmarkProvider:
    """One active benchmark (id 1) on the same calendar as the portfolio."""
    provider = FakeBenchmarkProvider()
    provider.add(
        BenchmarkInfo(id=1, symbol="SPY", name="S&P 500 ETF"),
        make_prices(START, values_from_returns(400.0, wavy_returns(60, amplitude=0.8, drift=0.03))),
    )
    return provider


@pytest.fixture
def metrics_store() -> FakeMetricsStore:
    return FakeMetricsStore()


@pytest.fixture
def engine(valuation_provider, benchmark_provider, risk_free_provider, metrics_store) -> PerformanceAnalysisEngine:
    """Engine over in-memory fakes."""
    return PerformanceAnalysisEngine(
        valuation_provider=valuation_provider,
        benchmark_provider=benchmark_provider,
        risk_free_provider=risk_free_provider,
        metrics_store=metrics_store,
    )
