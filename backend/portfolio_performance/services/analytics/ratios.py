# backend/portfolio_performance/services/analytics/ratios.py
"""
Risk-adjusted return ratios.

All inputs are annualized percentages. Every ratio returns 0 when its
denominator is 0, so results are always finite.

Formulas:
    Sharpe  = (R_p - R_f) / σ_p
    Sortino = (R_p - R_f) / σ_downside
    Calmar  = R_p / |MaxDrawdown|
"""

from portfolio_performance.services.analytics.returns import to_float


def sharpe_ratio(annualized_return: float, volatility: float, risk_free_rate: float) -> float:
    """Excess return per unit of total volatility."""
    annualized_return = to_float(annualized_return, "annualized_return", "sharpe_ratio")
    volatility = to_float(volatility, "volatility", "sharpe_ratio")
    risk_free_rate = to_float(risk_free_rate, "risk_free_rate", "sharpe_ratio")

    if volatility == 0:
        return 0.0
    return (annualized_return - risk_free_rate) / volatility


def sortino_ratio(annualized_return: float, downside_deviation: float, risk_free_rate: float) -> float:
    """Excess return per unit of downside deviation."""
    annualized_return = to_float(annualized_return, "annualized_return", "sortino_ratio")
    downside_deviation = to_float(downside_deviation, "downside_deviation", "sortino_ratio")
    risk_free_rate = to_float(risk_free_rate, "risk_free_rate", "sortino_ratio")

    if downside_deviation == 0:
        return 0.0
    return (annualized_return - risk_free_rate) / downside_deviation


def calmar_ratio(annualized_return: float, max_drawdown: float) -> float:
    """Annualized return per unit of maximum drawdown."""
    annualized_return = to_float(annualized_return, "annualized_return", "calmar_ratio")
    max_drawdown = to_float(max_drawdown, "max_drawdown", "calmar_ratio")

    if max_drawdown == 0:
        return 0.0
    return annualized_return / abs(max_drawdown)
