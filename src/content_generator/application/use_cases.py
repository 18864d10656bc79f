"""Use cases for the Content Generator Service.

Use cases orchestrate domain logic and infrastructure collaborators without
depending on FastAPI or httpx.

Use Case Responsibilities:
    - Validate the inbound prompt (delegated to the Prompt value object)
    - Build the augmented prompt
    - Charge the rate limiter before any upstream work
    - Run the retry controller and hand back its outcome unchanged
    - Turn any unexpected fault into an Internal error at the boundary

Key Use Cases:
    - GenerateContentUseCase: Single-prompt content generation
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from content_generator.core.rate_limit import Rejected
from content_generator.domain.entities import (
    AugmentedPrompt,
    ErrorKind,
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
)
from content_generator.domain.exceptions import DomainError
from content_generator.domain.value_objects import Prompt
from content_generator.telemetry.structured_logging import log_request_event

if TYPE_CHECKING:
    from content_generator.application.interfaces import (
        GenerationExecutorInterface,
        RateLimiterInterface,
    )

logger = logging.getLogger(__name__)

LOCAL_RATE_LIMIT_MESSAGE = "Too many requests. Please wait a minute and try again."
INTERNAL_ERROR_MESSAGE = "Internal server error. Please try again."


class GenerateContentUseCase:
    """Use case for single-prompt content generation.

    Exactly one GenerationResult or GenerationError is returned per call;
    ``execute`` never raises.

    Attributes:
        _rate_limiter: Admission control implementing RateLimiterInterface.
        _executor: Retry loop implementing GenerationExecutorInterface.
    """

    def __init__(
        self,
        rate_limiter: RateLimiterInterface,
        executor: GenerationExecutorInterface,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._executor = executor

    async def execute(
        self,
        prompt: object,
        client_key: str,
        request_id: str | None = None,
    ) -> GenerationOutcome:
        """Generate content for one inbound request.

        Args:
            prompt: Raw ``prompt`` value from the request body.
            client_key: Identity the rate limiter charges (client address).
            request_id: Identifier used in log events.

        Returns:
            GenerationResult, or GenerationError with kind:
                - INVALID_REQUEST: prompt missing, not a string, or blank
                - RATE_LIMITED: local quota exceeded (retry_after_seconds set)
                - whatever the retry controller reported
                - INTERNAL: any unexpected exception
        """
        start_time = time.perf_counter()
        prompt_chars = len(prompt) if isinstance(prompt, str) else None

        try:
            request = GenerationRequest(Prompt.parse(prompt))
            augmented = AugmentedPrompt.from_request(request)

            decision = await self._rate_limiter.admit(client_key)
            if isinstance(decision, Rejected):
                outcome: GenerationOutcome = GenerationError(
                    kind=ErrorKind.RATE_LIMITED,
                    message=LOCAL_RATE_LIMIT_MESSAGE,
                    retry_after_seconds=decision.retry_after_seconds,
                )
            else:
                logger.info(
                    "generate_admitted: request_id=%s, prompt_chars=%d",
                    request_id,
                    len(request.prompt),
                )
                outcome = await self._executor.execute(augmented, request_id=request_id)
        except DomainError as exc:
            logger.warning("generate_validation_error: request_id=%s, error=%s", request_id, exc)
            outcome = GenerationError(kind=ErrorKind.INVALID_REQUEST, message=str(exc))
        except Exception as exc:
            logger.exception(
                "unexpected_error_generate: request_id=%s, error_type=%s",
                request_id,
                type(exc).__name__,
            )
            outcome = GenerationError(kind=ErrorKind.INTERNAL, message=INTERNAL_ERROR_MESSAGE)

        log_request_event(
            {
                "event": "api_request",
                "operation": "generate",
                "request_id": request_id,
                "client_ip": client_key,
                "status": "success" if isinstance(outcome, GenerationResult) else "error",
                "error_type": getattr(outcome, "kind", None),
                "prompt_chars": prompt_chars,
                "latency_ms": round((time.perf_counter() - start_time) * 1000, 3),
            }
        )
        return outcome


__all__ = ["GenerateContentUseCase", "INTERNAL_ERROR_MESSAGE", "LOCAL_RATE_LIMIT_MESSAGE"]
