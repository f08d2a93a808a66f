# backend/portfolio_performance/services/analytics/risk.py
"""
Risk statistics for the analytics engine.

Pure functions over a sequence of daily percentage returns (1.5 = 1.5%):
- Total / annualized return (compounded)
- Volatility and downside deviation (annualized with √252)
- Max drawdown and its duration
- Historical Value at Risk and Expected Shortfall
- Skewness and excess kurtosis (population moments)

Degenerate inputs (empty or too-short series, zero dispersion) yield the
documented neutral value, never NaN or infinity. Structurally invalid
inputs (non-finite values, bad confidence, non-positive period) raise
InputValidationError.

No external dependencies (scipy, numpy) - uses only `statistics` stdlib.

Formulas:
    Total Return = Π(1 + r/100) - 1

    Annualized Return = ((1 + TR)^(365/days) - 1) * 100

    Volatility = stdev(r) * √252                      (sample, n-1)

    Downside Deviation = √(mean((r - T)² for r < T) * 252)

    Max Drawdown = max((Peak - C_t) / Peak) * 100,  C_t = Π(1 + r/100)

    VaR(c) = sorted(r)[⌊c * n⌋]
    ES(c)  = mean(sorted(r)[0 .. ⌊c * n⌋])
"""

import logging
import math
from collections.abc import Sequence
from statistics import mean, stdev

from portfolio_performance.services.analytics.returns import as_float_series, to_float
from portfolio_performance.services.analytics.types import RiskMetrics
from portfolio_performance.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    TRADING_DAYS_PER_YEAR,
    VAR_95_CONFIDENCE,
    VAR_99_CONFIDENCE,
)
from portfolio_performance.services.exceptions import InputValidationError

logger = logging.getLogger(__name__)

ANNUALIZATION_FACTOR = math.sqrt(TRADING_DAYS_PER_YEAR)


# =============================================================================
# RETURNS
# =============================================================================

def total_return(returns: Sequence[float]) -> float:
    """
    Compound daily percentage returns into a total return.

    Returns:
        Fraction, e.g. [10, -10] -> -0.01. Empty series -> 0.
    """
    values = as_float_series(returns, operation="total_return")

    growth = 1.0
    for r in values:
        growth *= 1 + r / 100

    return growth - 1


def annualized_return(total: float, days: int) -> float:
    """
    Annualize a compounded total return over a number of calendar days.

    Args:
        total: Total return as a fraction (0.05 = 5%)
        days: Length of the period; must be positive

    Returns:
        Annualized return in percent. A total loss (1 + total <= 0)
        is reported as -100.

    Raises:
        InputValidationError: If days <= 0, total is not finite, or the
            annualized figure overflows (large growth over a short period)
    """
    total = to_float(total, "total_return", "annualized_return")

    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise InputValidationError(
            f"Period length must be a positive number of days, got {days}",
            field="days",
            operation="annualized_return",
        )

    base = 1 + total
    if base <= 0:
        return -100.0

    try:
        return (base ** (CALENDAR_DAYS_PER_YEAR / days) - 1) * 100
    except OverflowError:
        raise InputValidationError(
            f"Annualized return of {total:.4g} over {days} day(s) exceeds the float range",
            field="days",
            operation="annualized_return",
        ) from None


# =============================================================================
# VOLATILITY
# =============================================================================

def volatility(returns: Sequence[float]) -> float:
    """
    Annualized sample standard deviation of daily returns.

    Returns 0 for fewer than 2 observations.
    """
    values = as_float_series(returns, operation="volatility")
    if len(values) < 2:
        return 0.0

    return stdev(values) * ANNUALIZATION_FACTOR


def downside_deviation(returns: Sequence[float], target: float = 0.0) -> float:
    """
    Annualized deviation of returns below a target.

    Only observations strictly below `target` contribute; the mean of their
    squared shortfalls is taken over those observations alone.

    Returns 0 when no observation falls below the target.
    """
    values = as_float_series(returns, operation="downside_deviation")

    shortfalls = [r - target for r in values if r < target]
    if not shortfalls:
        return 0.0

    variance = sum(d * d for d in shortfalls) / len(shortfalls)
    return math.sqrt(variance * TRADING_DAYS_PER_YEAR)


# =============================================================================
# DRAWDOWN
# =============================================================================

def max_drawdown(returns: Sequence[float]) -> float:
    """
    Largest peak-to-trough decline of the compounded series, in percent.

    The series starts at 1.0, which counts as the initial peak.
    """
    values = as_float_series(returns, operation="max_drawdown")

    cumulative = 1.0
    peak = 1.0
    worst = 0.0

    for r in values:
        cumulative *= 1 + r / 100
        if cumulative > peak:
            peak = cumulative
        drawdown = (peak - cumulative) / peak
        if drawdown > worst:
            worst = drawdown

    return worst * 100


def max_drawdown_duration(returns: Sequence[float]) -> int:
    """
    Longest run of observations without a new cumulative high.

    The run counter resets only when a strictly higher peak is set, so
    flat days (zero return at the peak) extend the run.
    """
    values = as_float_series(returns, operation="max_drawdown_duration")

    cumulative = 1.0
    peak = 1.0
    current = 0
    longest = 0

    for r in values:
        cumulative *= 1 + r / 100
        if cumulative > peak:
            peak = cumulative
            current = 0
        else:
            current += 1
            longest = max(longest, current)

    return longest


# =============================================================================
# VALUE AT RISK
# =============================================================================

def _validate_confidence(confidence: float, operation: str) -> float:
    confidence = to_float(confidence, "confidence", operation)
    if not 0 < confidence < 1:
        raise InputValidationError(
            f"Confidence must be between 0 and 1 (exclusive), got {confidence}",
            field="confidence",
            operation=operation,
        )
    return confidence


def _var_index(n: int, confidence: float) -> int:
    return math.floor(confidence * n)


def value_at_risk(returns: Sequence[float], confidence: float = VAR_95_CONFIDENCE) -> float:
    """
    Historical Value at Risk: the `confidence` quantile of daily returns.

    Args:
        returns: Daily percentage returns
        confidence: Lower-tail probability (0.05 for 95% VaR)

    Returns:
        Percentage return at the quantile (typically negative). 0 for an
        empty series.
    """
    confidence = _validate_confidence(confidence, "value_at_risk")
    values = as_float_series(returns, operation="value_at_risk")
    if not values:
        return 0.0

    ordered = sorted(values)
    return ordered[_var_index(len(ordered), confidence)]


def expected_shortfall(returns: Sequence[float], confidence: float = VAR_95_CONFIDENCE) -> float:
    """
    Mean of the returns at or below the VaR quantile (CVaR).

    Includes the VaR observation itself. 0 for an empty series.
    """
    confidence = _validate_confidence(confidence, "expected_shortfall")
    values = as_float_series(returns, operation="expected_shortfall")
    if not values:
        return 0.0

    ordered = sorted(values)
    tail = ordered[:_var_index(len(ordered), confidence) + 1]
    return mean(tail)


# =============================================================================
# HIGHER MOMENTS
# =============================================================================

def _standardized(values: tuple[float, ...]) -> list[float] | None:
    """Population z-scores, or None when the series has no dispersion."""
    avg = mean(values)
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    if variance == 0:
        return None
    sd = math.sqrt(variance)
    return [(v - avg) / sd for v in values]


def skewness(returns: Sequence[float]) -> float:
    """Population skewness; 0 for fewer than 3 observations or zero dispersion."""
    values = as_float_series(returns, operation="skewness")
    if len(values) < 3:
        return 0.0

    z = _standardized(values)
    if z is None:
        return 0.0
    return sum(v ** 3 for v in z) / len(z)


def kurtosis(returns: Sequence[float]) -> float:
    """Population excess kurtosis (normal = 0); 0 for fewer than 4 observations or zero dispersion."""
    values = as_float_series(returns, operation="kurtosis")
    if len(values) < 4:
        return 0.0

    z = _standardized(values)
    if z is None:
        return 0.0
    return sum(v ** 4 for v in z) / len(z) - 3


# =============================================================================
# COMBINED RISK CALCULATOR
# =============================================================================

class RiskCalculator:
    """Compute the full RiskMetrics block for one return series."""

    @staticmethod
    def calculate_all(returns: Sequence[float]) -> RiskMetrics:
        values = as_float_series(returns, operation="calculate_risk_metrics")

        return RiskMetrics(
            var_95=value_at_risk(values, VAR_95_CONFIDENCE),
            var_99=value_at_risk(values, VAR_99_CONFIDENCE),
            expected_shortfall_95=expected_shortfall(values, VAR_95_CONFIDENCE),
            expected_shortfall_99=expected_shortfall(values, VAR_99_CONFIDENCE),
            max_drawdown=max_drawdown(values),
            max_drawdown_duration=max_drawdown_duration(values),
            volatility=volatility(values),
            downside_deviation=downside_deviation(values),
            skewness=skewness(values),
            kurtosis=kurtosis(values),
        )
