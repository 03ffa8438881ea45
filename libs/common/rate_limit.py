"""Rate limiting configuration.

Uses slowapi. Counters live in ``RATE_LIMIT_STORAGE_URI`` so that every
worker process shares them (``redis://...`` when deployed, ``memory://``
for local runs).
"""

from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _get_user_or_ip(request: Request) -> str:
    """
    Rate limit by user ID if authenticated, otherwise by IP.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.user_id}"
    return f"ip:{_get_client_ip(request)}"


@lru_cache
def get_limiter() -> Limiter:
    """
    Create and return a cached Limiter instance.
    """
    settings = get_settings()

    return Limiter(
        key_func=_get_user_or_ip,
        default_limits=[settings.RATE_LIMIT_DEFAULT],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Return the standard error envelope with a Retry-After header.
    """
    retry_after = exc.detail.split("per")[0].strip() if exc.detail else "1 minute"

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": f"Too many requests. Limit is {retry_after}, try again later.",
        },
        headers={"Retry-After": str(getattr(exc, "retry_after", 60))},
    )


def invite_limit(func: Callable) -> Callable:
    """Strict limit for endpoints that send email (10/hour)."""
    return limiter.limit("10/hour")(func)


def write_limit(func: Callable) -> Callable:
    """Limit for progress/claim style write endpoints (30/minute)."""
    return limiter.limit("30/minute")(func)
