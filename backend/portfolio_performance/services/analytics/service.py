# backend/portfolio_performance/services/analytics/service.py
"""
Performance Analysis Engine.

The only component of the analytics package that performs I/O. It:
1. Fetches portfolio valuations and benchmark prices from its providers
2. Builds and aligns daily return series
3. Delegates to the pure calculators (risk, ratios, benchmark)
4. Resolves the risk-free rate for Sharpe/Sortino/alpha
5. Persists results through the metrics store

Architecture:
    PerformanceAnalysisEngine
        ├── uses → PortfolioValuationProvider (daily total values)
        ├── uses → BenchmarkPriceProvider (benchmark info + closes)
        ├── uses → RiskFreeRateProvider (rate lookup with fallback)
        ├── uses → PerformanceMetricsStore (upsert)
        └── uses → risk / ratios / BenchmarkComparator (pure)

Collaborator failures surface as ExternalDataError naming the operation
and period; the original exception is chained.

Usage:
    engine = PerformanceAnalysisEngine(
        valuation_provider=SqlPortfolioValuationProvider(SessionLocal),
        benchmark_provider=SqlBenchmarkPriceProvider(SessionLocal),
        risk_free_provider=RiskFreeRateProvider(SqlRiskFreeRateStore(SessionLocal), "AR", 85.0, 0.2329),
        metrics_store=SqlPerformanceMetricsStore(SessionLocal),
    )

    metrics = engine.calculate_portfolio_metrics(date(2024, 1, 1), date(2024, 12, 31))
    comparison = engine.compare_with_benchmark(1, date(2024, 1, 1), date(2024, 12, 31))
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta
from typing import TypeVar

from portfolio_performance.services.analytics.benchmark import (
    BenchmarkComparator,
    require_sample_size,
)
from portfolio_performance.services.analytics.ratios import (
    calmar_ratio,
    sharpe_ratio,
    sortino_ratio,
)
from portfolio_performance.services.analytics.returns import (
    align,
    as_float_series,
    daily_returns,
    date_key,
    return_values,
    to_value_points,
)
from portfolio_performance.services.analytics.risk import (
    RiskCalculator,
    annualized_return,
    downside_deviation,
    max_drawdown,
    total_return,
    value_at_risk,
    volatility,
)
from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.types import (
    BenchmarkInfo,
    BenchmarkSummary,
    ComparisonPeriod,
    ComparisonResult,
    PerformanceMetrics,
    PeriodRunResult,
    PeriodUpdateSummary,
    RiskMetrics,
    SeriesSummary,
)
from portfolio_performance.services.constants import (
    MIN_ALIGNED_OBSERVATIONS,
    REPORTING_PERIODS,
    VAR_95_CONFIDENCE,
    VAR_99_CONFIDENCE,
)
from portfolio_performance.services.exceptions import (
    AnalyticsError,
    EmptyInputError,
    ExternalDataError,
    InputValidationError,
    NoDataError,
    NotFoundError,
)
from portfolio_performance.services.protocols import (
    BenchmarkPriceProvider,
    PerformanceMetricsStore,
    PortfolioValuationProvider,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PerformanceAnalysisEngine:
    """
    Facade over the analytics calculators and their data collaborators.

    Holds no mutable state beyond its injected collaborators, so a single
    instance may serve concurrent requests.

    Attributes:
        _valuations: Source of portfolio values
        _benchmarks: Source of benchmark metadata and prices
        _risk_free: Risk-free rate resolver
        _metrics_store: Destination for computed metrics
        _min_aligned: Minimum aligned observations for a comparison
    """

    def __init__(
            self,
            valuation_provider: PortfolioValuationProvider,
            benchmark_provider: BenchmarkPriceProvider,
            risk_free_provider: RiskFreeRateProvider,
            metrics_store: PerformanceMetricsStore,
            min_aligned_observations: int = MIN_ALIGNED_OBSERVATIONS,
    ) -> None:
        self._valuations = valuation_provider
        self._benchmarks = benchmark_provider
        self._risk_free = risk_free_provider
        self._metrics_store = metrics_store
        self._min_aligned = min_aligned_observations

        logger.info(f"PerformanceAnalysisEngine initialized (min_aligned_observations={min_aligned_observations})")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def calculate_portfolio_metrics(
            self,
            start_date: date,
            end_date: date,
            calculation_date: date | None = None,
    ) -> PerformanceMetrics:
        """
        Standalone portfolio metrics over [start_date, end_date].

        Annualization uses the calendar length of the requested period.
        Benchmark-relative fields are left empty; tracking_error is 0.

        Args:
            start_date: First day of the period
            end_date: Last day of the period (must be after start_date)
            calculation_date: Record key for persistence (default: today)

        Raises:
            InputValidationError: end_date is not after start_date, a valuation
                row is malformed, or the annualized return overflows
            NoDataError: No valuations in the period
            ExternalDataError: The valuation provider failed
        """
        operation = "calculate_portfolio_metrics"
        start_date, end_date = self._validate_period(start_date, end_date, operation)

        logger.info(f"Calculating portfolio metrics for {start_date} to {end_date}")

        rows = self._fetch(
            "portfolio_valuations", operation, start_date, end_date,
            self._valuations.get_historical_values, start_date, end_date,
        )
        if not rows:
            raise NoDataError(operation, start_date, end_date)

        returns = return_values(daily_returns(
            to_value_points(rows, "total_value", operation, start_date, end_date)
        ))
        period_days = (end_date - start_date).days

        logger.debug(f"{len(rows)} valuations -> {len(returns)} daily returns over {period_days} days")

        total = total_return(returns)
        annualized = self._annualize(total, period_days, operation, start_date, end_date)
        vol = volatility(returns)
        drawdown = max_drawdown(returns)
        risk_free_rate = self._risk_free.resolve(end_date).annual_rate

        metrics = PerformanceMetrics(
            calculation_date=calculation_date or date.today(),
            period_days=period_days,
            portfolio_return=total,
            portfolio_volatility=vol,
            sharpe_ratio=sharpe_ratio(annualized, vol, risk_free_rate),
            sortino_ratio=sortino_ratio(annualized, downside_deviation(returns), risk_free_rate),
            calmar_ratio=calmar_ratio(annualized, drawdown),
            tracking_error=0.0,
            max_drawdown=drawdown,
            var_95=value_at_risk(returns, VAR_95_CONFIDENCE),
            var_99=value_at_risk(returns, VAR_99_CONFIDENCE),
        )

        logger.info(
            f"Portfolio metrics: return={total:.4f}, annualized={annualized:.2f}%, "
            f"volatility={vol:.2f}%, max_drawdown={drawdown:.2f}%"
        )
        return metrics

    def compare_with_benchmark(
            self,
            benchmark_id: int,
            start_date: date,
            end_date: date,
    ) -> ComparisonResult:
        """
        Compare the portfolio with a benchmark over [start_date, end_date].

        Both series are reduced to their common dates. Annualization uses the
        number of aligned observations as the period length.

        Raises:
            NotFoundError: Unknown benchmark_id
            InsufficientDataError: Fewer aligned observations than required
            InputValidationError: end_date is not after start_date, or a
                valuation or price row is malformed
            ExternalDataError: A provider failed
        """
        operation = "compare_with_benchmark"
        start_date, end_date = self._validate_period(start_date, end_date, operation)

        info = self._fetch(
            "benchmark_indices", operation, start_date, end_date,
            self._benchmarks.get_info, benchmark_id,
        )
        if info is None:
            raise NotFoundError("Benchmark", benchmark_id, operation, start_date, end_date)

        logger.info(f"Comparing portfolio with {info.symbol} for {start_date} to {end_date}")

        portfolio_rows = self._fetch(
            "portfolio_valuations", operation, start_date, end_date,
            self._valuations.get_historical_values, start_date, end_date,
        )
        benchmark_rows = self._fetch(
            "benchmark_prices", operation, start_date, end_date,
            self._benchmarks.get_range, benchmark_id, start_date, end_date,
        )

        aligned = align(
            daily_returns(to_value_points(portfolio_rows, "total_value", operation, start_date, end_date)),
            daily_returns(to_value_points(benchmark_rows, "close_price", operation, start_date, end_date)),
        )
        require_sample_size(len(aligned), self._min_aligned, operation, start_date, end_date)

        days = len(aligned)
        portfolio_returns = aligned.a_returns
        benchmark_returns = aligned.b_returns
        risk_free_rate = self._risk_free.resolve(end_date).annual_rate

        portfolio = self._summarize(portfolio_returns, days, risk_free_rate, operation, start_date, end_date)
        benchmark_base = self._summarize(benchmark_returns, days, risk_free_rate, operation, start_date, end_date)
        benchmark = BenchmarkSummary(**vars(benchmark_base), symbol=info.symbol, name=info.name)

        comparison = BenchmarkComparator.calculate_all(
            portfolio_returns,
            benchmark_returns,
            portfolio.annualized_return,
            benchmark.annualized_return,
            risk_free_rate,
            minimum_observations=self._min_aligned,
            start_date=start_date,
            end_date=end_date,
        )

        logger.info(
            f"Comparison with {info.symbol}: excess={comparison.excess_return:.2f}%, "
            f"beta={comparison.beta:.3f}, correlation={comparison.correlation:.3f} ({days} days)"
        )

        return ComparisonResult(
            portfolio=portfolio,
            benchmark=benchmark,
            comparison=comparison,
            period=ComparisonPeriod(start_date=start_date, end_date=end_date, days=days),
        )

    def calculate_risk_metrics(self, returns: Sequence[float]) -> RiskMetrics:
        """
        Standalone risk statistics of a daily percentage return series.

        Raises:
            EmptyInputError: No returns given
            InputValidationError: A value is not a finite number
        """
        values = as_float_series(returns, operation="calculate_risk_metrics")
        if not values:
            raise EmptyInputError("calculate_risk_metrics")

        logger.debug(f"Calculating risk metrics for {len(values)} returns")
        return RiskCalculator.calculate_all(values)

    def save_performance_metrics(self, metrics: PerformanceMetrics) -> None:
        """
        Upsert a metrics record keyed by (calculation_date, benchmark_id).

        Raises:
            ExternalDataError: The metrics store failed
        """
        self._fetch(
            "performance_metrics", "save_performance_metrics", None, None,
            self._metrics_store.upsert, metrics,
        )
        logger.info(
            f"Saved performance metrics for {metrics.calculation_date} "
            f"(benchmark={metrics.benchmark_id}, period_days={metrics.period_days})"
        )

    # =========================================================================
    # PERIODIC BENCHMARK UPDATE
    # =========================================================================

    @staticmethod
    def comparison_to_metrics(
            comparison: ComparisonResult,
            benchmark_id: int,
            period_days: int,
            calculation_date: date,
    ) -> PerformanceMetrics:
        """Flatten a comparison into a persistable metrics record."""
        portfolio = comparison.portfolio
        relative = comparison.comparison

        return PerformanceMetrics(
            calculation_date=calculation_date,
            benchmark_id=benchmark_id,
            period_days=period_days,
            portfolio_return=portfolio.total_return,
            benchmark_return=comparison.benchmark.total_return,
            excess_return=relative.excess_return,
            portfolio_volatility=portfolio.volatility,
            benchmark_volatility=comparison.benchmark.volatility,
            sharpe_ratio=portfolio.sharpe_ratio,
            sortino_ratio=portfolio.sortino_ratio,
            calmar_ratio=calmar_ratio(portfolio.annualized_return, portfolio.max_drawdown),
            information_ratio=relative.information_ratio,
            tracking_error=relative.tracking_error,
            max_drawdown=portfolio.max_drawdown,
            alpha=relative.alpha,
            beta=relative.beta,
            r_squared=relative.r_squared,
            var_95=portfolio.var_95,
            var_99=portfolio.var_99,
        )

    def update_period_metrics(
            self,
            as_of: date | None = None,
            benchmark_ids: Iterable[int] | None = None,
            periods: Sequence[tuple[int, str]] = REPORTING_PERIODS,
    ) -> PeriodUpdateSummary:
        """
        Refresh trailing-period comparisons for each benchmark and persist them.

        For every benchmark and every (days, label) period, compares
        [as_of - days, as_of] and upserts the result keyed on as_of. A failing
        period is logged and recorded; it does not stop the run.

        Args:
            as_of: End of every window and calculation date (default: today)
            benchmark_ids: Benchmarks to process (default: all active)
            periods: (days, label) windows

        Raises:
            ExternalDataError: The list of benchmarks could not be loaded
        """
        operation = "update_period_metrics"
        as_of = date_key(as_of, "as_of", operation) if as_of is not None else date.today()
        summary = PeriodUpdateSummary(as_of=as_of)

        for benchmark_id, info in self._benchmarks_to_update(benchmark_ids, operation):
            symbol = info.symbol if info is not None else str(benchmark_id)
            for period_days, period_name in periods:
                start_date = as_of - timedelta(days=period_days)
                try:
                    if info is None:
                        raise NotFoundError("Benchmark", benchmark_id, operation, start_date, as_of)
                    comparison = self.compare_with_benchmark(benchmark_id, start_date, as_of)
                    metrics = self.comparison_to_metrics(comparison, benchmark_id, period_days, as_of)
                    self.save_performance_metrics(metrics)
                except AnalyticsError as e:
                    logger.warning(f"Failed to calculate {period_name} performance for {symbol}: {e}")
                    summary.results.append(PeriodRunResult(
                        benchmark_id=benchmark_id,
                        symbol=symbol,
                        period_name=period_name,
                        period_days=period_days,
                        succeeded=False,
                        error=str(e),
                    ))
                    continue

                summary.results.append(PeriodRunResult(
                    benchmark_id=benchmark_id,
                    symbol=symbol,
                    period_name=period_name,
                    period_days=period_days,
                    succeeded=True,
                    metrics=metrics,
                ))

        logger.info(
            f"Period metrics update for {as_of} completed: "
            f"{summary.succeeded} succeeded, {summary.failed} failed",
            extra={"results": [r.label for r in summary.results]},
        )
        return summary

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _benchmarks_to_update(
            self,
            benchmark_ids: Iterable[int] | None,
            operation: str,
    ) -> list[tuple[int, BenchmarkInfo | None]]:
        """(id, info) pairs to process; info is None for an id with no benchmark."""
        if benchmark_ids is None:
            active = self._fetch("benchmark_indices", operation, None, None, self._benchmarks.list_active)
            return [(info.id, info) for info in active]

        benchmarks = []
        for benchmark_id in benchmark_ids:
            info = self._fetch("benchmark_indices", operation, None, None, self._benchmarks.get_info, benchmark_id)
            if info is None:
                logger.warning(f"Unknown benchmark {benchmark_id}; its periods are reported as failed")
            benchmarks.append((benchmark_id, info))
        return benchmarks

    @classmethod
    def _summarize(
            cls,
            returns: list[float],
            days: int,
            risk_free_rate: float,
            operation: str,
            start_date: date,
            end_date: date,
    ) -> SeriesSummary:
        total = total_return(returns)
        annualized = cls._annualize(total, days, operation, start_date, end_date)
        vol = volatility(returns)

        return SeriesSummary(
            total_return=total,
            annualized_return=annualized,
            volatility=vol,
            sharpe_ratio=sharpe_ratio(annualized, vol, risk_free_rate),
            max_drawdown=max_drawdown(returns),
            sortino_ratio=sortino_ratio(annualized, downside_deviation(returns), risk_free_rate),
            var_95=value_at_risk(returns, VAR_95_CONFIDENCE),
            var_99=value_at_risk(returns, VAR_99_CONFIDENCE),
        )

    @staticmethod
    def _annualize(total: float, days: int, operation: str, start_date: date, end_date: date) -> float:
        """annualized_return, with its validation errors re-raised under the engine operation."""
        try:
            return annualized_return(total, days)
        except InputValidationError as e:
            raise InputValidationError(
                e.description,
                field=e.field,
                operation=operation,
                start_date=start_date,
                end_date=end_date,
            ) from e

    @staticmethod
    def _validate_period(start_date: date, end_date: date, operation: str) -> tuple[date, date]:
        start_date = date_key(start_date, "start_date", operation)
        end_date = date_key(end_date, "end_date", operation)
        if end_date <= start_date:
            raise InputValidationError(
                f"end_date must be after start_date ({start_date} >= {end_date})",
                field="end_date",
                operation=operation,
                start_date=start_date,
                end_date=end_date,
            )
        return start_date, end_date

    @staticmethod
    def _fetch(
            source: str,
            operation: str,
            start_date: date | None,
            end_date: date | None,
            call: Callable[..., T],
            *args,
    ) -> T:
        """Invoke a collaborator, converting its failures into ExternalDataError."""
        try:
            return call(*args)
        except AnalyticsError:
            raise
        except Exception as e:
            logger.error(f"{operation}: {source} failed: {e}", exc_info=True)
            raise ExternalDataError(
                source=source,
                reason=str(e) or type(e).__name__,
                operation=operation,
                start_date=start_date,
                end_date=end_date,
            ) from e
