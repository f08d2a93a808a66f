# backend/portfolio_performance/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.
"""

from portfolio_performance.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_performance.schemas.performance import (
    PeriodRequest,
    CalculateMetricsRequest,
    RiskMetricsRequest,
    PeriodUpdateRequest,
    PerformanceMetricsResponse,
    SeriesSummaryResponse,
    BenchmarkSummaryResponse,
    ComparisonMetricsResponse,
    ComparisonPeriodResponse,
    ComparisonResponse,
    RiskMetricsResponse,
    PeriodRunResponse,
    PeriodUpdateResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Requests
    "PeriodRequest",
    "CalculateMetricsRequest",
    "RiskMetricsRequest",
    "PeriodUpdateRequest",
    # Responses
    "PerformanceMetricsResponse",
    "SeriesSummaryResponse",
    "BenchmarkSummaryResponse",
    "ComparisonMetricsResponse",
    "ComparisonPeriodResponse",
    "ComparisonResponse",
    "RiskMetricsResponse",
    "PeriodRunResponse",
    "PeriodUpdateResponse",
]
