"""
dealership_inventory.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs (echoed as x-request-id / x-correlation-id).
- Bind request metadata into structlog contextvars.
- Emit start/completion access logs and flag slow requests.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from dealership_inventory.observability.logging import get_logger

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, slow_request_ms: int = 5000) -> None:
        super().__init__(app)
        self._slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()
        log.info("request_started")
        status_code = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            log.info("request_completed", status_code=status_code, elapsed_ms=elapsed_ms)
            if elapsed_ms > self._slow_request_ms:
                log.warning("slow_request", elapsed_ms=elapsed_ms)
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        response.headers["x-correlation-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Domain, HTTP and integrity errors are rendered by `api.errors` inside the app, so
# they arrive here as normal responses. Anything else escapes `call_next` and is
# logged with status 500 before the server-error handler renders it.
