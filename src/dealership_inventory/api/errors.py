"""
dealership_inventory.api.errors

Exception handlers that render every failure as a uniform JSON body.

Responsibilities:
- Map domain errors, HTTP errors, validation errors and DB integrity errors
  to status codes.
- Log unhandled exceptions with traceback and hide internals from clients.

Body shape:
    {"status_code", "message", "detail", "timestamp", "request_id"}
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from dealership_inventory.errors import DomainError
from dealership_inventory.observability.logging import get_logger

log = get_logger(__name__)

# Literal: starlette renamed the 422 constant across releases.
_HTTP_422 = 422

_HTTP_MESSAGES = {
    400: "Invalid operation",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
}


def error_body(
    request: Request, *, status_code: int, message: str, detail: Any = None
) -> dict[str, Any]:
    return {
        "status_code": status_code,
        "message": message,
        "detail": detail,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "request_id": getattr(request.state, "request_id", None),
    }


def classify_integrity_error(exc: IntegrityError) -> str:
    """Turn a driver constraint message into a client-safe explanation."""

    raw = str(exc.orig).lower()
    if "unique" in raw or "duplicate key" in raw:
        return "A record with the same unique identifier already exists"
    if "foreign key" in raw:
        return "Cannot perform this operation due to related data constraints"
    if "not null" in raw or "null value" in raw:
        return "Required field cannot be empty"
    if "check constraint" in raw:
        return "The provided data violates business rules"
    return "Database operation failed due to data validation error"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    log.info("domain_error", error_type=type(exc).__name__, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            request, status_code=exc.status_code, message=exc.message, detail=exc.detail
        ),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = _HTTP_MESSAGES.get(exc.status_code, "Request failed")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, status_code=exc.status_code, message=message, detail=exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=_HTTP_422,
        content=error_body(
            request,
            status_code=_HTTP_422,
            message="Request validation failed",
            detail=jsonable_encoder(exc.errors()),
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    log.warning("integrity_error", error=str(exc.orig))
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=error_body(
            request,
            status_code=HTTP_400_BAD_REQUEST,
            message="Database operation failed",
            detail=classify_integrity_error(exc),
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled_exception",
        request_id=getattr(request.state, "request_id", None),
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            request,
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            message="An internal server error occurred",
            detail="Please contact support if the problem persists",
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)


# --- Module Notes -----------------------------------------------------------
# `Exception` is served by Starlette's outermost ServerErrorMiddleware, which
# re-raises after responding; in-process test clients must disable
# `raise_app_exceptions` to observe the 500 body.
