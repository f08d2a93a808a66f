# backend/portfolio_performance/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application (tables are created on startup)
- Registers global exception handlers
- Registers routers
- Defines the health endpoint
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portfolio_performance.config import settings
from portfolio_performance.database import init_db
from portfolio_performance.middleware import CorrelationIdMiddleware
from portfolio_performance.routers import performance_router
from portfolio_performance.schemas.errors import ErrorDetail, ValidationErrorDetail
from portfolio_performance.services.exceptions import (
    ServiceError,
    AnalyticsError,
    InputValidationError,
    EmptyInputError,
    InsufficientDataError,
    NotFoundError,
    NoDataError,
    ExternalDataError,
)
from portfolio_performance.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} started (environment={settings.environment})")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Portfolio performance, risk and benchmark analytics API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions carry no HTTP knowledge; the mapping lives here.
# Starlette dispatches on the closest class in the exception's MRO.
# =============================================================================

def _error_response(status_code: int, exc: AnalyticsError, **details) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details={**exc.context, **details},
        ).model_dump(),
    )


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    """Handle malformed analytics input (400)."""
    logger.warning(f"Invalid input: {exc}")
    return _error_response(400, exc, field=exc.field)


@app.exception_handler(EmptyInputError)
async def empty_input_handler(request: Request, exc: EmptyInputError) -> JSONResponse:
    """Handle empty return series (400)."""
    logger.warning(f"Empty input: {exc}")
    return _error_response(400, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle unknown benchmark (404)."""
    logger.warning(f"Not found: {exc.resource_type} {exc.resource_id}")
    return _error_response(404, exc, resource_type=exc.resource_type, resource_id=exc.resource_id)


@app.exception_handler(NoDataError)
async def no_data_handler(request: Request, exc: NoDataError) -> JSONResponse:
    """Handle a period without portfolio history (404)."""
    logger.warning(f"No data: {exc}")
    return _error_response(404, exc)


@app.exception_handler(InsufficientDataError)
async def insufficient_data_handler(request: Request, exc: InsufficientDataError) -> JSONResponse:
    """Handle comparisons with too few aligned observations (422)."""
    logger.warning(f"Insufficient data: {exc}")
    return _error_response(422, exc, required=exc.required, actual=exc.actual)


@app.exception_handler(ExternalDataError)
async def external_data_handler(request: Request, exc: ExternalDataError) -> JSONResponse:
    """Handle collaborator failures (503)."""
    logger.error(f"External data error: {exc}")
    return _error_response(503, exc, source=exc.source)


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    """Handle any other analytics error (500)."""
    logger.error(f"Analytics error: {exc}")
    return _error_response(500, exc)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="ServiceError",
            message=str(exc),
            details=None,
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert FastAPI's {"detail": ...} into the ErrorDetail format."""
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        422: "ValidationError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_types.get(exc.status_code, "HTTPError"),
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert request parsing errors into the ValidationErrorDetail format (422)."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(details=errors).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(performance_router)  # /performance/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Liveness check."""
    return {"status": "alive", "app": settings.app_name}
