"""
Per client IP request throttling with slowapi.

One application wide limit (``settings.rate_limit``) is shared by all
routes and enforced by ``SlowAPIMiddleware``.  Each application gets
its own ``Limiter`` and in-memory counters.
"""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import Settings


def build_limiter(app_settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        application_limits=[app_settings.rate_limit],
        enabled=app_settings.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    retry_after: Optional[str] = None
    limit = None
    if isinstance(exc, RateLimitExceeded):
        retry_after = getattr(exc, "retry_after", None)
        limit = exc.detail
    headers = {}
    if retry_after is not None:
        headers["Retry-After"] = str(retry_after)
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests",
            "message": "Too many requests from this IP, please try again later.",
            "limit": limit,
        },
        headers=headers,
    )
