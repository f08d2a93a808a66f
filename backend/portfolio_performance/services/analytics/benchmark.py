# backend/portfolio_performance/services/analytics/benchmark.py
"""
Benchmark comparison functions for the analytics engine.

This module compares two aligned daily return series (portfolio vs a
benchmark index such as MERVAL or ^SPX):
- Beta: Systematic risk relative to the benchmark
- Alpha: Excess return above the CAPM expectation (Jensen's Alpha)
- Correlation / R-squared: How closely the portfolio tracks the benchmark
- Tracking Error: Annualized volatility of the return differences
- Information Ratio: Excess return per unit of tracking error

Series must come out of returns.align(), so index i refers to the same date
in both. A length mismatch is a caller bug and raises InputValidationError.

No external dependencies (scipy, numpy) - uses only `statistics` stdlib.

Formulas:
    Beta = Cov(R_p, R_m) / Var(R_m)

    Alpha = R_p - [R_f + β(R_m - R_f)]

    Correlation = Cov(R_p, R_m) / (σ_p * σ_m)

    Tracking Error = std(R_p - R_m) * √252

    Information Ratio = (R_p - R_m) / Tracking Error
"""

import logging
import math
from collections.abc import Sequence
from datetime import date
from statistics import mean

from portfolio_performance.services.analytics.returns import as_float_series, to_float
from portfolio_performance.services.analytics.risk import volatility
from portfolio_performance.services.analytics.types import ComparisonMetrics
from portfolio_performance.services.constants import MIN_ALIGNED_OBSERVATIONS
from portfolio_performance.services.exceptions import (
    InputValidationError,
    InsufficientDataError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _paired(
        portfolio_returns: Sequence[float],
        benchmark_returns: Sequence[float],
        operation: str,
) -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Validate two series and require equal length."""
    p = as_float_series(portfolio_returns, "portfolio_returns", operation)
    b = as_float_series(benchmark_returns, "benchmark_returns", operation)

    if len(p) != len(b):
        raise InputValidationError(
            f"Portfolio and benchmark series must have the same length ({len(p)} != {len(b)})",
            field="benchmark_returns",
            operation=operation,
        )
    return p, b


def _covariance(x: Sequence[float], y: Sequence[float]) -> float:
    """Sample covariance (n-1). Callers guarantee len(x) == len(y) >= 2."""
    mean_x = mean(x)
    mean_y = mean(y)

    cov = sum((x[i] - mean_x) * (y[i] - mean_y) for i in range(len(x)))
    return cov / (len(x) - 1)


def _variance(x: Sequence[float]) -> float:
    # Same arithmetic as _covariance so beta(s, s) is exactly 1
    return _covariance(x, x)


# =============================================================================
# BETA & ALPHA
# =============================================================================

def beta(portfolio_returns: Sequence[float], benchmark_returns: Sequence[float]) -> float:
    """
    Calculate Beta (systematic risk).

    Interpretation:
        β > 1: More volatile than the benchmark
        β < 1: Less volatile than the benchmark
        β < 0: Moves opposite to the benchmark

    Returns:
        Beta, or 1.0 (market-neutral default) when there are fewer than 2
        observations or the benchmark has zero variance.
    """
    p, b = _paired(portfolio_returns, benchmark_returns, "beta")
    if len(p) < 2:
        return 1.0

    var_benchmark = _variance(b)
    if var_benchmark == 0:
        return 1.0

    return _covariance(p, b) / var_benchmark


def alpha(
        portfolio_annualized: float,
        benchmark_annualized: float,
        portfolio_beta: float,
        risk_free_rate: float,
) -> float:
    """
    Calculate Jensen's Alpha.

    Formula: α = R_p - [R_f + β(R_m - R_f)]

    Args:
        portfolio_annualized: Annualized portfolio return (%)
        benchmark_annualized: Annualized benchmark return (%)
        portfolio_beta: Portfolio beta
        risk_free_rate: Annual risk-free rate (%)
    """
    r_p = to_float(portfolio_annualized, "portfolio_annualized", "alpha")
    r_m = to_float(benchmark_annualized, "benchmark_annualized", "alpha")
    b = to_float(portfolio_beta, "beta", "alpha")
    r_f = to_float(risk_free_rate, "risk_free_rate", "alpha")

    expected_return = r_f + b * (r_m - r_f)
    return r_p - expected_return


# =============================================================================
# CORRELATION & R-SQUARED
# =============================================================================

def correlation(portfolio_returns: Sequence[float], benchmark_returns: Sequence[float]) -> float:
    """
    Pearson correlation coefficient.

    Returns 0 when there are fewer than 2 observations or either series has
    zero dispersion.
    """
    p, b = _paired(portfolio_returns, benchmark_returns, "correlation")
    if len(p) < 2:
        return 0.0

    var_p = _variance(p)
    var_b = _variance(b)
    if var_p == 0 or var_b == 0:
        return 0.0

    if p == b:
        return 1.0

    corr = _covariance(p, b) / math.sqrt(var_p * var_b)
    # Floating-point noise can push |corr| marginally past 1
    return max(-1.0, min(1.0, corr))


def r_squared(corr: float) -> float:
    """
    Coefficient of determination: share of portfolio variance explained by
    the benchmark.
    """
    corr = to_float(corr, "correlation", "r_squared")
    return corr * corr


# =============================================================================
# TRACKING ERROR & INFORMATION RATIO
# =============================================================================

def tracking_error(portfolio_returns: Sequence[float], benchmark_returns: Sequence[float]) -> float:
    """Annualized volatility of the daily return differences (R_p - R_m)."""
    p, b = _paired(portfolio_returns, benchmark_returns, "tracking_error")
    differences = [p[i] - b[i] for i in range(len(p))]
    return volatility(differences)


def information_ratio(excess_return: float, tracking_err: float) -> float:
    """Excess return per unit of tracking error; 0 when tracking error is 0."""
    excess_return = to_float(excess_return, "excess_return", "information_ratio")
    tracking_err = to_float(tracking_err, "tracking_error", "information_ratio")

    if tracking_err == 0:
        return 0.0
    return excess_return / tracking_err


# =============================================================================
# SAMPLE SIZE GATE
# =============================================================================

def require_sample_size(
        actual: int,
        minimum: int = MIN_ALIGNED_OBSERVATIONS,
        operation: str = "compare_with_benchmark",
        start_date: date | None = None,
        end_date: date | None = None,
) -> None:
    """
    Raise InsufficientDataError when fewer than `minimum` aligned
    observations are available.
    """
    if actual < minimum:
        logger.warning(
            f"{operation}: only {actual} aligned observations "
            f"for {start_date}..{end_date}, need {minimum}"
        )
        raise InsufficientDataError(
            required=minimum,
            actual=actual,
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )


# =============================================================================
# COMBINED BENCHMARK COMPARATOR
# =============================================================================

class BenchmarkComparator:
    """
    Computes the relative metrics block of a benchmark comparison.

    The sample-size gate runs before any statistic, so an undersized
    comparison never produces partial numbers.
    """

    @staticmethod
    def calculate_all(
            portfolio_returns: Sequence[float],
            benchmark_returns: Sequence[float],
            portfolio_annualized: float,
            benchmark_annualized: float,
            risk_free_rate: float,
            minimum_observations: int = MIN_ALIGNED_OBSERVATIONS,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> ComparisonMetrics:
        """
        Args:
            portfolio_returns: Aligned daily portfolio returns (%)
            benchmark_returns: Aligned daily benchmark returns (%)
            portfolio_annualized: Annualized portfolio return (%)
            benchmark_annualized: Annualized benchmark return (%)
            risk_free_rate: Annual risk-free rate (%) for alpha
            minimum_observations: Gate threshold
            start_date, end_date: Period, for error context only

        Raises:
            InsufficientDataError: Fewer than `minimum_observations` points
            InputValidationError: Series of different length
        """
        p, b = _paired(portfolio_returns, benchmark_returns, "compare_with_benchmark")
        require_sample_size(len(p), minimum_observations, "compare_with_benchmark", start_date, end_date)

        excess = portfolio_annualized - benchmark_annualized
        result_beta = beta(p, b)
        result_corr = correlation(p, b)
        result_te = tracking_error(p, b)

        return ComparisonMetrics(
            excess_return=excess,
            tracking_error=result_te,
            information_ratio=information_ratio(excess, result_te),
            beta=result_beta,
            alpha=alpha(portfolio_annualized, benchmark_annualized, result_beta, risk_free_rate),
            r_squared=r_squared(result_corr),
            correlation=result_corr,
        )
