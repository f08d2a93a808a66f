# tests/test_dependencies.py
"""
Tests for the dependency singletons.
"""

from datetime import date

from portfolio_performance.config import settings
from portfolio_performance.dependencies import (
    get_analysis_engine,
    get_metrics_store,
    get_risk_free_provider,
)
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.repositories import SqlPerformanceMetricsStore


class TestSingletons:
    """Tests for the lru_cache-backed providers."""

    def test_engine_is_singleton(self):
        engine = get_analysis_engine()

        assert isinstance(engine, PerformanceAnalysisEngine)
        assert get_analysis_engine() is engine

    def test_metrics_store_is_shared(self):
        assert isinstance(get_metrics_store(), SqlPerformanceMetricsStore)
        assert get_metrics_store() is get_metrics_store()

    def test_risk_free_provider_uses_settings(self):
        provider = get_risk_free_provider()

        assert provider.country == settings.risk_free_country
        fallback = provider.fallback(date(2024, 1, 1))
        assert fallback.annual_rate == settings.risk_free_fallback_annual_rate
        assert fallback.daily_rate == settings.risk_free_fallback_daily_rate
        assert fallback.is_fallback is True
