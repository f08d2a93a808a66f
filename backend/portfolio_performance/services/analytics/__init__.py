# backend/portfolio_performance/services/analytics/__init__.py
"""
Portfolio performance and risk analytics.

Architecture:
    analytics/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Dataclasses for series and results
    ├── returns.py               # Daily returns, date alignment, input validation
    ├── risk.py                  # Volatility, drawdown, VaR/ES, moments
    ├── ratios.py                # Sharpe, Sortino, Calmar
    ├── benchmark.py             # Beta, alpha, correlation, tracking error
    ├── risk_free.py             # Risk-free rate lookup with fallback
    └── service.py               # PerformanceAnalysisEngine (orchestrator)

Data Flow:
    PortfolioValuationProvider / BenchmarkPriceProvider
        ↓
    daily_returns() → align()
        ↓
    ┌─────────────────────────────────────────┐
    │        PerformanceAnalysisEngine        │
    │  ┌─────────────┐  ┌─────────────────┐   │
    │  │ risk        │  │ ratios          │   │
    │  │ • Volatility│  │ • Sharpe        │   │
    │  │ • Drawdown  │  │ • Sortino       │   │
    │  │ • VaR / ES  │  │ • Calmar        │   │
    │  └─────────────┘  └─────────────────┘   │
    │  ┌───────────────────────────────────┐  │
    │  │ BenchmarkComparator               │  │
    │  │ • Beta  • Alpha  • Correlation    │  │
    │  └───────────────────────────────────┘  │
    └─────────────────────────────────────────┘
        ↓
    PerformanceMetrics / ComparisonResult / RiskMetrics
        ↓
    PerformanceMetricsStore
"""

from portfolio_performance.services.analytics.benchmark import (
    BenchmarkComparator,
    alpha,
    beta,
    correlation,
    information_ratio,
    r_squared,
    require_sample_size,
    tracking_error,
)
from portfolio_performance.services.analytics.ratios import (
    calmar_ratio,
    sharpe_ratio,
    sortino_ratio,
)
from portfolio_performance.services.analytics.returns import (
    align,
    daily_returns,
)
from portfolio_performance.services.analytics.risk import (
    RiskCalculator,
    annualized_return,
    downside_deviation,
    expected_shortfall,
    kurtosis,
    max_drawdown,
    max_drawdown_duration,
    skewness,
    total_return,
    value_at_risk,
    volatility,
)
from portfolio_performance.services.analytics.risk_free import RiskFreeRateProvider
from portfolio_performance.services.analytics.service import PerformanceAnalysisEngine
from portfolio_performance.services.analytics.types import (
    AlignedSeries,
    BenchmarkInfo,
    ComparisonResult,
    PerformanceMetrics,
    PeriodUpdateSummary,
    ReturnObservation,
    RiskFreeRate,
    RiskMetrics,
    ValuePoint,
)

__all__ = [
    # Engine
    "PerformanceAnalysisEngine",
    "RiskFreeRateProvider",

    # Types
    "AlignedSeries",
    "BenchmarkInfo",
    "ComparisonResult",
    "PerformanceMetrics",
    "PeriodUpdateSummary",
    "ReturnObservation",
    "RiskFreeRate",
    "RiskMetrics",
    "ValuePoint",

    # Calculators
    "RiskCalculator",
    "BenchmarkComparator",

    # Individual functions
    "daily_returns",
    "align",
    "total_return",
    "annualized_return",
    "volatility",
    "downside_deviation",
    "max_drawdown",
    "max_drawdown_duration",
    "value_at_risk",
    "expected_shortfall",
    "skewness",
    "kurtosis",
    "sharpe_ratio",
    "sortino_ratio",
    "calmar_ratio",
    "beta",
    "alpha",
    "correlation",
    "r_squared",
    "tracking_error",
    "information_ratio",
    "require_sample_size",
]
