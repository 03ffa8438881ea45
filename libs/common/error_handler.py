"""Global exception handlers.

Every error leaves the API as ``{"success": false, "message": ...}`` with the
matching HTTP status. Outside production the stack trace of unexpected
errors is included to speed up debugging.
"""

import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    *,
    errors: Optional[Any] = None,
    headers: Optional[dict[str, str]] = None,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = errors
    request_id = get_request_id()
    if request_id:
        content["request_id"] = request_id
    if exc is not None and not get_settings().is_production:
        content["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if isinstance(exc.detail, str):
        message, errors = exc.detail, None
    else:
        message, errors = "Request failed", exc.detail
    return error_response(
        exc.status_code,
        message,
        errors=errors,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location), "message": err.get("msg")})
    message = "; ".join(
        f"{e['field']}: {e['message']}" if e["field"] else e["message"]
        for e in errors
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST, message or "Invalid request", errors=errors
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return error_response(status.HTTP_400_BAD_REQUEST, "Resource already exists")


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "Resource not found")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", exc=exc
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the global exception handlers on an app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
