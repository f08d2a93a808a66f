# backend/portfolio_performance/services/constants.py
"""
Centralized constants for the analytics services.

Deployment-tunable values (risk-free fallback, minimum comparison sample)
live in config.Settings; the values here are fixed conventions of the
calculations themselves.

Usage:
    from portfolio_performance.services.constants import (
        TRADING_DAYS_PER_YEAR,
        REPORTING_PERIODS,
    )
"""


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Used for annualizing volatility, downside deviation and tracking error
TRADING_DAYS_PER_YEAR: int = 252

# Used for annualizing compounded returns
CALENDAR_DAYS_PER_YEAR: int = 365


# =============================================================================
# VALUE AT RISK
# =============================================================================

# Quantiles of the daily return distribution. VaR at 0.05 is the 95% VaR.
VAR_95_CONFIDENCE: float = 0.05
VAR_99_CONFIDENCE: float = 0.01


# =============================================================================
# BENCHMARK COMPARISON
# =============================================================================

# Common dates required before beta/correlation are considered meaningful
MIN_ALIGNED_OBSERVATIONS: int = 30

# Trailing windows refreshed by the periodic benchmark update: (days, label)
REPORTING_PERIODS: tuple[tuple[int, str], ...] = (
    (30, "1M"),
    (90, "3M"),
    (180, "6M"),
    (365, "1Y"),
)
