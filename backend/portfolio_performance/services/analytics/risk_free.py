# backend/portfolio_performance/services/analytics/risk_free.py
"""
Risk-free rate resolution.

Looks up the most recent stored rate on or before a date for a country.
When nothing is stored, or the store fails, a configured fallback rate is
returned instead (flagged with is_fallback=True) so ratio calculations can
still run.
"""

import logging
from datetime import date

from portfolio_performance.services.analytics.types import RiskFreeRate
from portfolio_performance.services.protocols import RiskFreeRateStore

logger = logging.getLogger(__name__)


class RiskFreeRateProvider:
    """
    Resolves the annual/daily risk-free rate applicable on a date.

    Args:
        store: Rate store (see RiskFreeRateStore)
        country: Default country code for lookups
        fallback_annual_rate: Annual rate (%) used when no rate is available
        fallback_daily_rate: Daily rate (%) paired with the annual fallback
    """

    def __init__(
            self,
            store: RiskFreeRateStore,
            country: str,
            fallback_annual_rate: float,
            fallback_daily_rate: float,
    ) -> None:
        self._store = store
        self._country = country
        self._fallback_annual_rate = fallback_annual_rate
        self._fallback_daily_rate = fallback_daily_rate

    @property
    def country(self) -> str:
        return self._country

    def resolve(self, on_date: date, country: str | None = None) -> RiskFreeRate:
        """
        Rate in force on `on_date` (latest recorded_date <= on_date).

        Never raises on store errors: they are logged and the fallback is used.
        """
        country = country or self._country

        try:
            record = self._store.lookup(on_date, country)
        except Exception:
            logger.warning(
                f"Risk-free rate lookup failed for {country} on {on_date}, "
                f"using fallback {self._fallback_annual_rate}%",
                exc_info=True,
            )
            return self.fallback(on_date, country)

        if record is None:
            logger.warning(
                f"No risk-free rate stored for {country} on or before {on_date}, "
                f"using fallback {self._fallback_annual_rate}%"
            )
            return self.fallback(on_date, country)

        logger.debug(f"Risk-free rate for {country} on {on_date}: {record.annual_rate}% (recorded {record.recorded_date})")

        return RiskFreeRate(
            date=record.recorded_date,
            annual_rate=float(record.annual_rate),
            daily_rate=float(record.daily_rate),
            country=country,
        )

    def fallback(self, on_date: date, country: str | None = None) -> RiskFreeRate:
        return RiskFreeRate(
            date=on_date,
            annual_rate=self._fallback_annual_rate,
            daily_rate=self._fallback_daily_rate,
            country=country or self._country,
            is_fallback=True,
        )
