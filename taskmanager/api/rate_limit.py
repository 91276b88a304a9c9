"""
Rate limiting.

One fixed window per client IP, shared by every route. Counting and
headers come from slowapi; this module only builds the limiter from
settings and renders the 429 in the API's error envelope.
"""

from __future__ import annotations

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from taskmanager.api.schemas import error_body
from taskmanager.config import Settings

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests, please try again later"


def create_limiter(settings: Settings) -> Limiter:
    """
    Build the app-wide limiter.

    Application limits are counted under a single scope, so every route
    draws from the same per-IP budget.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[
            f"{settings.rate_limit_requests}/{settings.rate_limit_window_seconds} seconds"
        ],
        strategy="fixed-window",
        headers_enabled=True,
        enabled=settings.rate_limit_enabled,
    )


# Must stay synchronous: SlowAPIMiddleware calls it directly
def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)}: {exc.detail}")
    response = JSONResponse(status_code=429, content=error_body(RATE_LIMITED_MESSAGE))
    return request.app.state.limiter._inject_headers(
        response, request.state.view_rate_limit
    )
