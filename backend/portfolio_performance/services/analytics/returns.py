# backend/portfolio_performance/services/analytics/returns.py
"""
Return series construction for the analytics engine.

Turns valuation / price histories into daily percentage returns and lines
two return series up on their common dates.

Formulas:
    r_t = (V_t - V_{t-1}) / V_{t-1} * 100

Conventions:
    - Input points are sorted by date before differencing.
    - A pair whose previous value is zero produces no return (skipped).
    - Alignment is an inner join on the calendar date; datetimes are
      reduced to their date part first.

All functions are pure. Inputs are never mutated.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from numbers import Real

from portfolio_performance.services.analytics.types import (
    AlignedSeries,
    ReturnObservation,
    ValuePoint,
)
from portfolio_performance.services.exceptions import InputValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def to_float(
        value,
        field: str = "value",
        operation: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
) -> float:
    """
    Convert a numeric input to float, rejecting anything non-finite.

    Accepts int, float and Decimal. Booleans, strings, None, NaN and
    infinities raise InputValidationError carrying the given operation
    and period.
    """
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InputValidationError(
            f"Expected a number for '{field}', got {type(value).__name__}",
            field=field,
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )

    result = float(value)
    if not math.isfinite(result):
        raise InputValidationError(
            f"Non-finite value for '{field}': {value}",
            field=field,
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )
    return result


def as_float_series(
        values: Iterable,
        field: str = "returns",
        operation: str | None = None,
) -> tuple[float, ...]:
    """Validate a sequence of numbers and return it as an immutable float tuple."""
    if isinstance(values, (str, bytes)):
        raise InputValidationError(
            f"Expected a sequence of numbers for '{field}'",
            field=field,
            operation=operation,
        )
    return tuple(to_float(v, field, operation) for v in values)


def date_key(
        value: date | datetime,
        field: str = "date",
        operation: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
) -> date:
    """Normalize a date or datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InputValidationError(
        f"Expected a date for '{field}', got {type(value).__name__}",
        field=field,
        operation=operation,
        start_date=start_date,
        end_date=end_date,
    )


def to_value_points(
        rows: Iterable,
        attr: str,
        operation: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
) -> list[ValuePoint]:
    """
    Convert collaborator rows into validated ValuePoints.

    Args:
        rows: Objects exposing `.date` and the value attribute
        attr: Name of the value attribute ("total_value", "close_price")
        operation, start_date, end_date: Context attached to any
            InputValidationError raised for a malformed row
    """
    context = {"operation": operation, "start_date": start_date, "end_date": end_date}
    return [
        ValuePoint(
            date=date_key(row.date, "date", **context),
            value=to_float(getattr(row, attr), attr, **context),
        )
        for row in rows
    ]


# =============================================================================
# DAILY RETURNS
# =============================================================================

def daily_returns(values: Sequence[ValuePoint]) -> list[ReturnObservation]:
    """
    Build daily percentage returns from a value history.

    Args:
        values: (date, value) points in any order

    Returns:
        One ReturnObservation per consecutive pair, dated on the later
        point. Empty when fewer than 2 points are given.
    """
    if len(values) < 2:
        return []

    points = sorted(
        (ValuePoint(date=date_key(p.date), value=to_float(p.value, "value", "daily_returns")) for p in values),
        key=lambda p: p.date,
    )

    observations: list[ReturnObservation] = []
    skipped = 0

    for prev, curr in zip(points, points[1:]):
        if prev.value == 0:
            skipped += 1
            continue

        observations.append(ReturnObservation(
            date=curr.date,
            return_pct=(curr.value - prev.value) / prev.value * 100,
            value=curr.value,
        ))

    if skipped:
        logger.debug(f"Skipped {skipped} return(s) with a zero previous value")

    return observations


# =============================================================================
# ALIGNMENT
# =============================================================================

def align(
        series_a: Sequence[ReturnObservation],
        series_b: Sequence[ReturnObservation],
) -> AlignedSeries:
    """
    Inner-join two return series on the calendar date.

    Output follows series A's order (chronological when A comes from
    daily_returns). Dates present in only one series are dropped.
    """
    b_by_date = {date_key(obs.date): obs for obs in series_b}

    aligned_a: list[ReturnObservation] = []
    aligned_b: list[ReturnObservation] = []

    for obs in series_a:
        match = b_by_date.get(date_key(obs.date))
        if match is not None:
            aligned_a.append(obs)
            aligned_b.append(match)

    logger.debug(
        f"Aligned {len(aligned_a)} common dates "
        f"(a={len(series_a)}, b={len(series_b)})"
    )

    return AlignedSeries(a=aligned_a, b=aligned_b)


def return_values(observations: Iterable[ReturnObservation]) -> list[float]:
    """Extract the percentage returns from a list of observations."""
    return [obs.return_pct for obs in observations]
