# backend/portfolio_performance/dependencies.py
"""
Dependency injection for FastAPI routes.

The engine and its collaborators are process-wide singletons: the
repositories open their own short-lived sessions, so nothing here is
request-scoped. Lazily built on first use to avoid import-time side effects.

Usage in routers:
    from portfolio_performance.dependencies import get_analysis_engine

    @router.get("/metrics")
    def get_metrics(engine: PerformanceAnalysisEngine = Depends(get_analysis_engine)):
        ...

Tests override get_analysis_engine via app.dependency_overrides.
"""

import logging
from functools import lru_cache

from portfolio_performance.config import settings
from portfolio_performance.database import SessionLocal
from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.repositories import (
    SqlBenchmarkPriceProvider,
    SqlPerformanceMetricsStore,
    SqlPortfolioValuationProvider,
    SqlRiskFreeRateStore,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_risk_free_provider (store only)
# 2. get_metrics_store (no deps)
# 3. get_analysis_engine (depends on both)


@lru_cache(maxsize=1)
def get_risk_free_provider() -> RiskFreeRateProvider:
    """Risk-free rate resolver configured from settings."""
    return RiskFreeRateProvider(
        store=SqlRiskFreeRateStore(SessionLocal),
        country=settings.risk_free_country,
        fallback_annual_rate=settings.risk_free_fallback_annual_rate,
        fallback_daily_rate=settings.risk_free_fallback_daily_rate,
    )


@lru_cache(maxsize=1)
def get_metrics_store() -> SqlPerformanceMetricsStore:
    return SqlPerformanceMetricsStore(SessionLocal)


@lru_cache(maxsize=1)
def get_analysis_engine() -> PerformanceAnalysisEngine:
    """Get the singleton PerformanceAnalysisEngine instance."""
    logger.debug("Creating PerformanceAnalysisEngine singleton")
    return PerformanceAnalysisEngine(
        valuation_provider=SqlPortfolioValuationProvider(SessionLocal),
        benchmark_provider=SqlBenchmarkPriceProvider(SessionLocal),
        risk_free_provider=get_risk_free_provider(),
        metrics_store=get_metrics_store(),
        min_aligned_observations=settings.min_aligned_observations,
    )
