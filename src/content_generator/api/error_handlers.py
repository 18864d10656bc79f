"""Mapping from the local error taxonomy to HTTP responses.

This is the only place that knows which status code each ErrorKind gets.
Routes never reclassify errors; they only format them.

Status Mapping:
    - InvalidRequest, MalformedUpstreamResponse -> 400 Bad Request
    - AccessDenied -> 403 Forbidden
    - RateLimited -> 429 Too Many Requests (+ Retry-After)
    - UpstreamUnavailable -> 503 Service Unavailable
    - Internal -> 500 Internal Server Error
"""

from __future__ import annotations

from fastapi import status
from fastapi.responses import JSONResponse

from content_generator.api.models import ErrorResponse
from content_generator.domain.entities import ErrorKind, GenerationError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MALFORMED_UPSTREAM_RESPONSE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind."""
    return STATUS_BY_KIND[kind]


def error_response(error: GenerationError) -> JSONResponse:
    """Render a GenerationError as ``{error, retryAfter?}`` with its status code."""
    headers = None
    if error.retry_after_seconds is not None:
        headers = {"Retry-After": str(error.retry_after_seconds)}
    return JSONResponse(
        status_code=status_for(error.kind),
        content=ErrorResponse(
            error=error.message, retry_after=error.retry_after_seconds
        ).to_content(),
        headers=headers,
    )


__all__ = ["STATUS_BY_KIND", "error_response", "status_for"]
