# backend/portfolio_performance/routers/performance.py
"""
Portfolio performance endpoints.

- GET  /performance/metrics                  - Portfolio metrics, or a benchmark comparison when benchmark_id is given
- POST /performance/metrics                  - Calculate and persist portfolio metrics
- GET  /performance/metrics/stored           - Read a persisted metrics record
- POST /performance/compare/{benchmark_id}   - Benchmark comparison for a period
- POST /performance/risk                     - Risk statistics of a supplied return series
- POST /performance/period-update            - Refresh 1M/3M/6M/1Y benchmark metrics

Domain errors propagate to the global handlers in main.py.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from portfolio_performance.dependencies import get_analysis_engine, get_metrics_store
from portfolio_performance.schemas.performance import (
    CalculateMetricsRequest,
    ComparisonResponse,
    PerformanceMetricsResponse,
    PeriodRequest,
    PeriodUpdateRequest,
    PeriodUpdateResponse,
    RiskMetricsRequest,
    RiskMetricsResponse,
)
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.repositories import SqlPerformanceMetricsStore

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/performance",
    tags=["Performance"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/metrics",
    response_model=PerformanceMetricsResponse | ComparisonResponse,
    summary="Get performance metrics",
)
def get_performance_metrics(
        start_date: date = Query(..., description="First day of the period"),
        end_date: date = Query(..., description="Last day of the period"),
        benchmark_id: int | None = Query(None, description="Compare with this benchmark"),
        engine: PerformanceAnalysisEngine = Depends(get_analysis_engine),
):
    """
    Without benchmark_id: standalone portfolio metrics (not persisted).

    With benchmark_id: full benchmark comparison, same as
    POST /performance/compare/{benchmark_id}.
    """
    if benchmark_id is not None:
        comparison = engine.compare_with_benchmark(benchmark_id, start_date, end_date)
        return ComparisonResponse.model_validate(comparison)

    metrics = engine.calculate_portfolio_metrics(start_date, end_date)
    return PerformanceMetricsResponse.model_validate(metrics)


@router.post(
    "/metrics",
    response_model=PerformanceMetricsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Calculate and store portfolio metrics",
)
def calculate_and_store_metrics(
        request: CalculateMetricsRequest,
        engine: PerformanceAnalysisEngine = Depends(get_analysis_engine),
):
    """Record is upserted under (calculation_date, no benchmark)."""
    metrics = engine.calculate_portfolio_metrics(
        request.start_date,
        request.end_date,
        calculation_date=request.calculation_date,
    )
    engine.save_performance_metrics(metrics)
    return PerformanceMetricsResponse.model_validate(metrics)


@router.get(
    "/metrics/stored",
    response_model=PerformanceMetricsResponse,
    summary="Get stored performance metrics",
)
def get_stored_metrics(
        calculation_date: date = Query(...),
        benchmark_id: int | None = Query(None),
        store: SqlPerformanceMetricsStore = Depends(get_metrics_store),
):
    metrics = store.get(calculation_date, benchmark_id)
    if metrics is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No metrics stored for {calculation_date} (benchmark={benchmark_id})",
        )
    return PerformanceMetricsResponse.model_validate(metrics)


@router.post(
    "/compare/{benchmark_id}",
    response_model=ComparisonResponse,
    summary="Compare portfolio with a benchmark",
)
def compare_with_benchmark(
        benchmark_id: int,
        request: PeriodRequest,
        engine: PerformanceAnalysisEngine = Depends(get_analysis_engine),
):
    """
    Requires at least MIN_ALIGNED_OBSERVATIONS common dates between the
    portfolio and the benchmark (422 otherwise).
    """
    comparison = engine.compare_with_benchmark(benchmark_id, request.start_date, request.end_date)
    return ComparisonResponse.model_validate(comparison)


@router.post(
    "/risk",
    response_model=RiskMetricsResponse,
    summary="Risk statistics of a return series",
)
def calculate_risk_metrics(
        request: RiskMetricsRequest,
        engine: PerformanceAnalysisEngine = Depends(get_analysis_engine),
):
    return RiskMetricsResponse.model_validate(engine.calculate_risk_metrics(request.returns))


@router.post(
    "/period-update",
    response_model=PeriodUpdateResponse,
    summary="Refresh trailing-period benchmark metrics",
)
def run_period_update(
        request: PeriodUpdateRequest,
        engine: PerformanceAnalysisEngine = Depends(get_analysis_engine),
):
    """
    Runs the 1M/3M/6M/1Y comparisons for each benchmark and stores them.
    Individual failures are reported per period; the call itself succeeds.
    """
    summary = engine.update_period_metrics(as_of=request.as_of, benchmark_ids=request.benchmark_ids)
    logger.info(f"Period update via API: {summary.succeeded} succeeded, {summary.failed} failed")
    return PeriodUpdateResponse.model_validate(summary)
