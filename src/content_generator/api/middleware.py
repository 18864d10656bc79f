"""Middleware and error handlers for the API.

Key Features:
    - Structured Logging: Every HTTP request is logged with latency and status
    - CORS: Cross-origin resource sharing configuration
    - Error Handling: Global handlers keep every error body in the
      ``{error, retryAfter?}`` shape and never expose internals

Middleware Stack:
    1. StructuredLoggingMiddleware: Logs all HTTP requests
    2. CORSMiddleware: Handles cross-origin requests
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from content_generator.api.dependencies import get_request_context
from content_generator.api.models import ErrorResponse
from content_generator.telemetry.structured_logging import log_request_event

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
API_NOT_FOUND_MESSAGE = "API endpoint not found"
UNHANDLED_ERROR_MESSAGE = "Something went wrong!"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that emits a structured log event for every HTTP request.

    Logs are emitted in a finally block so failed requests are recorded
    too; exceptions are re-raised unchanged.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start_time = time.perf_counter()
        status_code: int | None = None
        error_type: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            status_code = getattr(exc, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
            error_type = type(exc).__name__
            raise
        finally:
            ctx = get_request_context(request)
            event: dict[str, object] = {
                "event": "http_request",
                "request_id": ctx.request_id,
                "client_ip": ctx.client_ip,
                "path": request.url.path,
                "method": request.method,
                "status_code": status_code,
                "latency_ms": round((time.perf_counter() - start_time) * 1000, 3),
            }
            if error_type:
                event["error_type"] = error_type
            log_request_event(event)


def setup_middleware(app: FastAPI) -> None:
    """Configure middleware for the FastAPI application.

    Args:
        app: FastAPI application instance to configure.
    """
    from content_generator.core.config import settings

    app.add_middleware(StructuredLoggingMiddleware)

    cors_origins = settings.api.cors_origins
    allow_origins = (
        [origin.strip() for origin in cors_origins.split(",")] if cors_origins != "*" else ["*"]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Registers handlers for:
    - StarletteHTTPException (404 on unknown API routes, 405, dependency 503s)
    - RequestValidationError (400)
    - Exception (500 - catch-all)
    """

    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and request.url.path.startswith(
            API_PREFIX
        ):
            message = API_NOT_FOUND_MESSAGE
        else:
            message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=message).to_content(),
            headers=getattr(exc, "headers", None),
        )

    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        ctx = get_request_context(request)
        logger.warning("validation_error: request_id=%s, errors=%s", ctx.request_id, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Invalid request format").to_content(),
        )

    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return a generic 500 without exposing internal error details."""
        ctx = get_request_context(request)
        logger.exception(
            "unhandled_exception: request_id=%s, error_type=%s",
            ctx.request_id,
            type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=UNHANDLED_ERROR_MESSAGE).to_content(),
        )

    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(global_exception_handler)


__all__ = [
    "API_NOT_FOUND_MESSAGE",
    "StructuredLoggingMiddleware",
    "setup_exception_handlers",
    "setup_middleware",
]
