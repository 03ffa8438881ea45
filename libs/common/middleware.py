"""Request logging middleware.

Every request gets an id (taken from ``X-Request-ID`` or generated) that is
bound to log records and echoed back in the response. Completed requests are
logged with the authenticated member and tenant when auth ran.

Usage:
    from libs.common.middleware import add_observability_middleware

    app = FastAPI()
    add_observability_middleware(app)
"""
import time
from typing import Any, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

QUIET_PATHS = frozenset({"/health"})


def _caller_fields(request: Request) -> dict[str, Any]:
    user = getattr(request.state, "user", None)
    if user is None:
        return {}
    return {
        "user_id": str(user.user_id),
        "role": user.role.value,
        "tenant_id": str(user.tenant_id) if user.tenant_id else None,
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get("X-Request-ID"),
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
            self._log_completion(request, response, started)
            response.headers["X-Request-ID"] = request_id
            return response
        except Exception:
            logger.exception(
                "%s %s failed",
                request.method,
                request.url.path,
                extra={
                    "extra_fields": {
                        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                        **_caller_fields(request),
                    }
                },
            )
            raise
        finally:
            clear_request_context()

    @staticmethod
    def _log_completion(request: Request, response: Response, started: float) -> None:
        if request.url.path in QUIET_PATHS:
            return
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        level = "warning" if response.status_code >= 400 else "info"
        getattr(logger, level)(
            "%s %s -> %d (%.2fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "extra_fields": {
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    **_caller_fields(request),
                }
            },
        )


def add_observability_middleware(app: FastAPI) -> None:
    """Configure logging and install the request context middleware."""
    configure_logging()
    app.add_middleware(RequestContextMiddleware)
