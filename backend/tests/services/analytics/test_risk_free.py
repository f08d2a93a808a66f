# backend/tests/services/analytics/test_risk_free.py
"""
Tests for RiskFreeRateProvider.

Test Coverage:
- Stored rate lookup (latest on or before the date)
- Fallback when nothing is stored
- Fallback when the store fails
- Country override
"""

import logging
from datetime import date

from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.types import RateRecord
from tests.fakes import FakeRateStore


def _provider(store: FakeRateStore) -> RiskFreeRateProvider:
    return RiskFreeRateProvider(store, country="AR", fallback_annual_rate=85.0, fallback_daily_rate=0.2329)


class TestResolve:
    """Tests for RiskFreeRateProvider.resolve."""

    def test_uses_stored_rate(self):
        store = FakeRateStore(RateRecord(recorded_date=date(2024, 3, 1), annual_rate=40.0, daily_rate=0.0922))

        rate = _provider(store).resolve(date(2024, 3, 15))

        assert rate.annual_rate == 40.0
        assert rate.daily_rate == 0.0922
        assert rate.date == date(2024, 3, 1)
        assert rate.country == "AR"
        assert rate.is_fallback is False
        assert store.lookups == [(date(2024, 3, 15), "AR")]

    def test_fallback_when_missing(self, caplog):
        provider = _provider(FakeRateStore())

        with caplog.at_level(logging.WARNING):
            rate = provider.resolve(date(2024, 3, 15))

        assert rate.is_fallback is True
        assert rate.annual_rate == 85.0
        assert rate.daily_rate == 0.2329
        assert rate.date == date(2024, 3, 15)
        assert "No risk-free rate stored" in caplog.text

    def test_fallback_when_store_fails(self, caplog):
        provider = _provider(FakeRateStore(error=RuntimeError("connection refused")))

        with caplog.at_level(logging.WARNING):
            rate = provider.resolve(date(2024, 3, 15))

        assert rate.is_fallback is True
        assert rate.annual_rate == 85.0
        assert "lookup failed" in caplog.text

    def test_country_override(self):
        store = FakeRateStore()

        rate = _provider(store).resolve(date(2024, 3, 15), country="US")

        assert store.lookups == [(date(2024, 3, 15), "US")]
        assert rate.country == "US"

    def test_default_country(self):
        assert _provider(FakeRateStore()).country == "AR"
