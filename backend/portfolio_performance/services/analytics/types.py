# backend/portfolio_performance/services/analytics/types.py
"""
Data types for the analytics engine.

Calculations run on floats (percentages, `1.5` = 1.5%). Rows coming from
collaborators may carry Decimal values; they are converted at the boundary
by returns.to_value_points().

Architecture:
    Collaborator rows:  ValuationPoint, PricePoint, BenchmarkInfo, RateRecord
    Series:             ValuePoint -> ReturnObservation -> AlignedSeries
    Results:            PerformanceMetrics, ComparisonResult, RiskMetrics,
                        RiskFreeRate, PeriodRunResult
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


# =============================================================================
# COLLABORATOR ROWS
# =============================================================================

@dataclass(frozen=True)
class ValuationPoint:
    """Total portfolio value on a date, as returned by the valuation provider."""
    date: date
    total_value: Decimal | float


@dataclass(frozen=True)
class PricePoint:
    """Benchmark closing price on a date."""
    date: date
    close_price: Decimal | float


@dataclass(frozen=True)
class BenchmarkInfo:
    id: int
    symbol: str
    name: str


@dataclass(frozen=True)
class RateRecord:
    """A stored risk-free rate observation (rates in percent)."""
    recorded_date: date
    annual_rate: float
    daily_rate: float


# =============================================================================
# SERIES
# =============================================================================

@dataclass(frozen=True)
class ValuePoint:
    """A validated (date, value) pair fed into daily_returns()."""
    date: date
    value: float


@dataclass(frozen=True)
class ReturnObservation:
    """
    Daily return between two consecutive observations.

    Attributes:
        date: Date of the later observation
        return_pct: Percentage return (1.5 = 1.5%)
        value: Value on `date`
    """
    date: date
    return_pct: float
    value: float


@dataclass(frozen=True)
class AlignedSeries:
    """
    Two return series restricted to their common dates.

    `a[i]` and `b[i]` always refer to the same date.
    """
    a: list[ReturnObservation]
    b: list[ReturnObservation]

    def __len__(self) -> int:
        return len(self.a)

    @property
    def dates(self) -> list[date]:
        return [obs.date for obs in self.a]

    @property
    def a_returns(self) -> list[float]:
        return [obs.return_pct for obs in self.a]

    @property
    def b_returns(self) -> list[float]:
        return [obs.return_pct for obs in self.b]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class PerformanceMetrics:
    """
    Persistable metrics record, keyed by (calculation_date, benchmark_id).

    Return fields:
        portfolio_return / benchmark_return: compounded total return as a
            fraction (-0.01 = -1%)
        excess_return: annualized portfolio minus annualized benchmark, in %
        volatility, drawdown, VaR: percent
    """
    calculation_date: date
    period_days: int
    portfolio_return: float
    portfolio_volatility: float
    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float
    tracking_error: float
    max_drawdown: float
    var_95: float
    var_99: float
    benchmark_id: int | None = None
    benchmark_return: float | None = None
    excess_return: float | None = None
    benchmark_volatility: float | None = None
    information_ratio: float | None = None
    alpha: float | None = None
    beta: float | None = None
    r_squared: float | None = None


@dataclass
class SeriesSummary:
    """
    Per-series block of a benchmark comparison.

    sortino_ratio, var_95 and var_99 are carried so a comparison can be
    persisted as a complete PerformanceMetrics record.
    """
    total_return: float
    annualized_return: float
    volatility: float
    sharpe_ratio: float
    max_drawdown: float
    sortino_ratio: float
    var_95: float
    var_99: float


@dataclass
class BenchmarkSummary(SeriesSummary):
    symbol: str = ""
    name: str = ""


@dataclass
class ComparisonMetrics:
    """Relative metrics between portfolio and benchmark."""
    excess_return: float
    tracking_error: float
    information_ratio: float
    beta: float
    alpha: float
    r_squared: float
    correlation: float


@dataclass
class ComparisonPeriod:
    start_date: date
    end_date: date
    days: int


@dataclass
class ComparisonResult:
    portfolio: SeriesSummary
    benchmark: BenchmarkSummary
    comparison: ComparisonMetrics
    period: ComparisonPeriod


@dataclass
class RiskMetrics:
    """Standalone risk statistics of a return series (percent unless noted)."""
    var_95: float
    var_99: float
    expected_shortfall_95: float
    expected_shortfall_99: float
    max_drawdown: float
    max_drawdown_duration: int  # observations
    volatility: float
    downside_deviation: float
    skewness: float
    kurtosis: float


@dataclass(frozen=True)
class RiskFreeRate:
    """
    Risk-free rate applicable on a date, in percent.

    Attributes:
        is_fallback: True when no stored rate was found and the configured
            default was used instead
    """
    date: date
    annual_rate: float
    daily_rate: float
    country: str
    is_fallback: bool = False


@dataclass
class PeriodRunResult:
    """Outcome of one (benchmark, period) step of the periodic update."""
    benchmark_id: int
    symbol: str
    period_name: str
    period_days: int
    succeeded: bool
    metrics: PerformanceMetrics | None = None
    error: str | None = None

    @property
    def label(self) -> str:
        status = "Success" if self.succeeded else "Failed"
        return f"{self.symbol}-{self.period_name}: {status}"


@dataclass
class PeriodUpdateSummary:
    """All steps of one periodic update run."""
    as_of: date
    results: list[PeriodRunResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)
