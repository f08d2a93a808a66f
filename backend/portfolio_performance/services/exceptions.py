# backend/portfolio_performance/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
main.py maps them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    └── AnalyticsError (operation, start_date, end_date)
        ├── InputValidationError    - malformed input (non-finite value, bad period, bad confidence)
        ├── EmptyInputError         - empty return series where one is required
        ├── InsufficientDataError   - too few aligned observations
        ├── NotFoundError           - unknown benchmark
        ├── NoDataError             - no portfolio history in the period
        └── ExternalDataError       - a collaborator (store/provider) failed

Every AnalyticsError names the operation that failed and, where there is
one, the period being analysed. Both appear in str(exc).
"""

from datetime import date


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# ANALYTICS ERRORS
# =============================================================================


class AnalyticsError(ServiceError):
    """
    Base exception for analytics calculation errors.

    Attributes:
        description: The message without the operation/period suffix
        operation: Name of the operation that failed (e.g. "compare_with_benchmark")
        start_date: Start of the analysed period, if any
        end_date: End of the analysed period, if any
    """

    def __init__(
            self,
            message: str,
            operation: str | None = None,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> None:
        self.description = message
        self.operation = operation
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(self._with_context(message))

    def _with_context(self, message: str) -> str:
        context = []
        if self.operation:
            context.append(f"operation={self.operation}")
        if self.start_date is not None or self.end_date is not None:
            context.append(f"period={self.start_date}..{self.end_date}")
        if not context:
            return message
        return f"{message} [{', '.join(context)}]"

    @property
    def context(self) -> dict:
        """Operation and period as a JSON-friendly dict (for error responses)."""
        return {
            "operation": self.operation,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


class InputValidationError(AnalyticsError):
    """
    Raised when an input is structurally invalid.

    Examples: a non-numeric or non-finite value in a series, an end date on
    or before the start date, a VaR confidence outside (0, 1).

    Attributes:
        field: The offending argument, when known
    """

    def __init__(
            self,
            message: str,
            field: str | None = None,
            operation: str | None = None,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> None:
        self.field = field
        super().__init__(message, operation=operation, start_date=start_date, end_date=end_date)


class EmptyInputError(AnalyticsError):
    """Raised when an operation that needs observations receives none."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        super().__init__(message or "No returns provided", operation=operation)


class InsufficientDataError(AnalyticsError):
    """
    Raised when fewer aligned observations exist than a comparison requires.

    Attributes:
        required: Minimum number of observations
        actual: Number of observations available
    """

    def __init__(
            self,
            required: int,
            actual: int,
            operation: str | None = None,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            f"Insufficient data for comparison: {actual} aligned observations, need at least {required}",
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )


class NotFoundError(AnalyticsError):
    """
    Raised when a referenced resource does not exist.

    Attributes:
        resource_type: Type of resource (e.g., "Benchmark")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            resource_type: str,
            resource_id: int | str,
            operation: str | None = None,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} {resource_id} not found",
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )


class NoDataError(AnalyticsError):
    """Raised when the valuation provider has no history for the requested period."""

    def __init__(
            self,
            operation: str,
            start_date: date | None = None,
            end_date: date | None = None,
            message: str | None = None,
    ) -> None:
        super().__init__(
            message or "No portfolio history available for the period",
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )


class ExternalDataError(AnalyticsError):
    """
    Raised when a collaborator (valuation provider, price store, metrics store) fails.

    The original exception is chained as __cause__.

    Attributes:
        source: Which collaborator failed (e.g. "benchmark_prices")
    """

    def __init__(
            self,
            source: str,
            reason: str,
            operation: str | None = None,
            start_date: date | None = None,
            end_date: date | None = None,
    ) -> None:
        self.source = source
        self.reason = reason
        super().__init__(
            f"Failed to access {source}: {reason}",
            operation=operation,
            start_date=start_date,
            end_date=end_date,
        )


__all__ = [
    "ServiceError",
    "AnalyticsError",
    "InputValidationError",
    "EmptyInputError",
    "InsufficientDataError",
    "NotFoundError",
    "NoDataError",
    "ExternalDataError",
]
