"""Dependency injection for FastAPI endpoints.

Collaborators are created during lifespan startup, stored here via
``set_dependencies()``, and handed to routes through FastAPI ``Depends()``.
Tests replace them with ``app.dependency_overrides``.

Dependency Flow:
    1. Lifespan startup builds the upstream client, limiter and retry controller
    2. set_dependencies() stores the instances
    3. get_*() functions retrieve instances (raise 503 if not initialized)
    4. get_generate_use_case() wires the use case from the stored instances
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel, ValidationError
from slowapi.util import get_remote_address

from content_generator.api.models import RequestContext
from content_generator.application.use_cases import GenerateContentUseCase
from content_generator.core.config import settings
from content_generator.core.rate_limit import FixedWindowRateLimiter
from content_generator.core.resilience import RetryController
from content_generator.domain.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Global instances (initialized in lifespan)
_rate_limiter: FixedWindowRateLimiter | None = None
_retry_controller: RetryController | None = None


def set_dependencies(
    rate_limiter: FixedWindowRateLimiter,
    retry_controller: RetryController,
) -> None:
    """Set global dependencies (called during lifespan startup)."""
    global _rate_limiter, _retry_controller
    _rate_limiter = rate_limiter
    _retry_controller = retry_controller


def clear_dependencies() -> None:
    """Forget global dependencies (called during lifespan shutdown)."""
    global _rate_limiter, _retry_controller
    _rate_limiter = None
    _retry_controller = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get the process-wide rate limiter.

    Raises:
        HTTPException: If the limiter is not initialized.
    """
    if _rate_limiter is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiter not initialized",
        )
    return _rate_limiter


def get_retry_controller() -> RetryController:
    """Get the retry controller.

    Raises:
        HTTPException: If the controller is not initialized.
    """
    if _retry_controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upstream client not initialized",
        )
    return _retry_controller


def get_generate_use_case(
    rate_limiter: Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)],
    retry_controller: Annotated[RetryController, Depends(get_retry_controller)],
) -> GenerateContentUseCase:
    """Build the generation use case from injected collaborators."""
    return GenerateContentUseCase(rate_limiter=rate_limiter, executor=retry_controller)


def get_request_context(request: Request) -> RequestContext:
    """Extract (or reuse) request context from a FastAPI request.

    The context is cached in ``request.state`` so middleware, routes and
    error handlers share one request_id.
    """
    ctx: RequestContext | None = getattr(request.state, "request_context", None)
    if ctx is None:
        ctx = RequestContext(
            request_id=str(uuid.uuid4()),
            client_ip=get_remote_address(request),
            user_agent=request.headers.get("user-agent"),
        )
        request.state.request_context = ctx
    return ctx


def _body_too_large_message(size: int, limit: int) -> str:
    return f"Request body is {size:,} bytes but the limit is {limit:,} bytes"


async def _read_body(request: Request, limit: int) -> bytes:
    """Read the body, stopping as soon as it passes *limit* bytes.

    Covers chunked uploads that carry no Content-Length header.
    """
    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise InvalidRequestError(_body_too_large_message(received, limit))
        chunks.append(chunk)
    return b"".join(chunks)


async def parse_request_json(request: Request, model_cls: type[T]) -> T:
    """Parse and validate a JSON request body into a Pydantic model.

    Raises:
        InvalidRequestError: If the body is too large, is not valid JSON,
            is not a JSON object, or fails model validation.
    """
    limit = settings.api.max_request_body_bytes
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        raise InvalidRequestError(_body_too_large_message(int(declared), limit))

    body_bytes = await _read_body(request, limit)

    if not body_bytes:
        return model_cls.model_validate({})

    try:
        payload = json.loads(body_bytes)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError("Request body must be valid JSON") from exc

    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequestError("Invalid request format") from exc


# FastAPI dependency annotations
RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
GenerateUseCaseDep = Annotated[GenerateContentUseCase, Depends(get_generate_use_case)]

__all__ = [
    "GenerateUseCaseDep",
    "RequestContextDep",
    "clear_dependencies",
    "get_generate_use_case",
    "get_rate_limiter",
    "get_request_context",
    "get_retry_controller",
    "parse_request_json",
    "set_dependencies",
]
