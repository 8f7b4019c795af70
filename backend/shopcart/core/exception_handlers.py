"""Exception handlers that turn errors into the API error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from shopcart.core.config import settings
from shopcart.core.errors import (
    AppError,
    ConflictError,
    InvalidReferenceError,
    StoreUnavailable,
    ValidationFailure,
)
from shopcart.core.rate_limit import rate_limit_exceeded_handler
from shopcart.core.responses import error_response

logger = logging.getLogger(__name__)

# Seconds a client should wait after the pool was exhausted
POOL_RETRY_AFTER = 5


def _error_json(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message, exc.errors))


def _request_context(request: Request) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc}", extra=_request_context(request))
    return _error_json(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or path parameters are client errors like any rule violation."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())[1:]]
        if error.get("type") == "json_invalid":
            errors.append(("body", "Request body must be valid JSON"))
        else:
            errors.append((".".join(location) or "request", error.get("msg", "Invalid value")))
    return _error_json(ValidationFailure(errors=errors))


def classify_integrity_error(exc: IntegrityError) -> AppError:
    """Map a store constraint violation onto the error taxonomy.

    The driver's text never reaches the client.
    """
    detail = str(exc.orig).lower()
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    if code == "23505" or "unique" in detail or "duplicate" in detail:
        return ConflictError("Duplicate value violates a unique constraint")
    if code == "23503" or "foreign key" in detail:
        return InvalidReferenceError()
    return ValidationFailure("Value violates a database constraint")


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    error = classify_integrity_error(exc)
    logger.warning(
        f"Integrity error translated to {type(error).__name__}", extra=_request_context(request)
    )
    return _error_json(error)


async def pool_timeout_handler(request: Request, exc: PoolTimeoutError) -> JSONResponse:
    """Pool exhausted: tell the client to retry instead of failing hard."""
    logger.error(
        f"Connection pool exhausted after {settings.db_pool_timeout}s", extra=_request_context(request)
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_response("Service temporarily unavailable, please retry"),
        headers={"Retry-After": str(POOL_RETRY_AFTER)},
    )


async def store_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    logger.error(f"Database error: {exc.__class__.__name__}", exc_info=exc, extra=_request_context(request))
    return _error_json(StoreUnavailable())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", exc_info=exc, extra=_request_context(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Server Error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(PoolTimeoutError, pool_timeout_handler)
    app.add_exception_handler(OperationalError, store_error_handler)
    app.add_exception_handler(DBAPIError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
