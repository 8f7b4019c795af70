"""Shared rate limiter instance for use across route files."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shopcart.core.config import settings

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

# Every resource route draws from one per-IP budget
API_SCOPE = "api"

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
    headers_enabled=True,
)


def api_rate_limit() -> str:
    """Per-IP budget shared by every resource route, e.g. "100/900 seconds".

    Evaluated per request so the window can be changed through settings.
    """
    return f"{settings.rate_limit_requests}/{settings.rate_limit_window} seconds"


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reject with the API envelope and the standard rate-limit headers."""
    response = JSONResponse(
        status_code=429,
        content={"success": False, "message": RATE_LIMIT_MESSAGE},
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
