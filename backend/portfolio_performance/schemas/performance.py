# backend/portfolio_performance/schemas/performance.py
"""
Pydantic schemas for the performance API.

Units:
- *_return on metrics records: total return as a fraction (-0.01 = -1%)
- annualized returns, volatility, drawdown, VaR, tracking error: percent
- ratios: unitless

Responses are built from the engine's dataclasses via
model_validate(..., from_attributes=True).
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# REQUESTS
# =============================================================================

class PeriodRequest(BaseModel):
    """Analysis period, both ends inclusive. Ordering is checked by the engine."""

    start_date: date = Field(..., description="First day of the period")
    end_date: date = Field(..., description="Last day of the period")


class CalculateMetricsRequest(PeriodRequest):
    calculation_date: date | None = Field(
        None,
        description="Key the record is stored under (default: today)"
    )


class RiskMetricsRequest(BaseModel):
    returns: list[float] = Field(
        ...,
        description="Daily percentage returns (1.5 = 1.5%)"
    )


class PeriodUpdateRequest(BaseModel):
    as_of: date | None = Field(None, description="End date of every window (default: today)")
    benchmark_ids: list[int] | None = Field(None, description="Benchmarks to refresh (default: all active)")


# =============================================================================
# PERFORMANCE METRICS
# =============================================================================

class PerformanceMetricsResponse(BaseModel):
    """A (possibly persisted) metrics record."""

    model_config = ConfigDict(from_attributes=True)

    calculation_date: date
    benchmark_id: int | None = None
    period_days: int

    portfolio_return: float = Field(..., description="Compounded total return (fraction)")
    benchmark_return: float | None = None
    excess_return: float | None = Field(None, description="Annualized portfolio minus benchmark (%)")

    portfolio_volatility: float
    benchmark_volatility: float | None = None
    max_drawdown: float
    tracking_error: float
    var_95: float
    var_99: float

    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float
    information_ratio: float | None = None

    alpha: float | None = None
    beta: float | None = None
    r_squared: float | None = None


# =============================================================================
# BENCHMARK COMPARISON
# =============================================================================

class SeriesSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_return: float
    annualized_return: float
    volatility: float
    sharpe_ratio: float
    max_drawdown: float
    sortino_ratio: float
    var_95: float
    var_99: float


class BenchmarkSummaryResponse(SeriesSummaryResponse):
    symbol: str
    name: str


class ComparisonMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    excess_return: float
    tracking_error: float
    information_ratio: float
    beta: float
    alpha: float
    r_squared: float
    correlation: float


class ComparisonPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_date: date
    end_date: date
    days: int = Field(..., description="Aligned observations used for annualization")


class ComparisonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    portfolio: SeriesSummaryResponse
    benchmark: BenchmarkSummaryResponse
    comparison: ComparisonMetricsResponse
    period: ComparisonPeriodResponse


# =============================================================================
# RISK METRICS
# =============================================================================

class RiskMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    var_95: float
    var_99: float
    expected_shortfall_95: float
    expected_shortfall_99: float
    max_drawdown: float
    max_drawdown_duration: int
    volatility: float
    downside_deviation: float
    skewness: float
    kurtosis: float


# =============================================================================
# PERIODIC UPDATE
# =============================================================================

class PeriodRunResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    benchmark_id: int
    symbol: str
    period_name: str
    period_days: int
    succeeded: bool
    label: str
    error: str | None = None


class PeriodUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    as_of: date
    succeeded: int
    failed: int
    results: list[PeriodRunResponse]
