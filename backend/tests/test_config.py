# tests/test_config.py
"""
Tests for environment-dependent settings.
"""

import pytest
from pydantic import ValidationError

from portfolio_performance.config import Settings
from portfolio_performance.services.constants import MIN_ALIGNED_OBSERVATIONS


class TestDatabaseUrl:
    """Tests for the database URL validator."""

    def test_test_environment_defaults_to_memory(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = Settings(environment="test")

        assert settings.database_url == "sqlite:///:memory:"
        assert settings.is_sqlite
        assert settings.is_test

    def test_development_defaults_to_sqlite_file(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = Settings(environment="development")

        assert settings.database_url.startswith("sqlite:///")
        assert settings.database_url.endswith("portfolio_performance.db")

    def test_production_requires_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValidationError, match="DATABASE_URL is required"):
            Settings(environment="production")

    def test_production_rejects_sqlite(self):
        with pytest.raises(ValidationError, match="requires PostgreSQL"):
            Settings(environment="production", database_url="sqlite:///prod.db")

    def test_production_with_postgres(self):
        settings = Settings(environment="production", database_url="postgresql://u:p@db:5432/metrics")

        assert settings.is_production
        assert not settings.is_sqlite


class TestAnalyticsSettings:
    """Tests for risk-free and comparison settings."""

    def test_defaults(self, monkeypatch):
        for name in ("RISK_FREE_COUNTRY", "RISK_FREE_FALLBACK_ANNUAL_RATE", "MIN_ALIGNED_OBSERVATIONS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(environment="test")

        assert settings.risk_free_country == "AR"
        assert settings.risk_free_fallback_annual_rate == 85.0
        assert settings.risk_free_fallback_daily_rate == 0.2329
        assert settings.min_aligned_observations == MIN_ALIGNED_OBSERVATIONS

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("RISK_FREE_COUNTRY", "US")
        monkeypatch.setenv("RISK_FREE_FALLBACK_ANNUAL_RATE", "5.25")
        monkeypatch.setenv("MIN_ALIGNED_OBSERVATIONS", "60")

        settings = Settings(environment="test")

        assert settings.risk_free_country == "US"
        assert settings.risk_free_fallback_annual_rate == 5.25
        assert settings.min_aligned_observations == 60

    def test_minimum_observations_lower_bound(self):
        with pytest.raises(ValidationError):
            Settings(environment="test", min_aligned_observations=1)
