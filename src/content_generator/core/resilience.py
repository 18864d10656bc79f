"""Retry controller for upstream generation calls (powered by tenacity).

The controller calls the upstream client one attempt at a time. Success and
fatal outcomes end the loop immediately; transient outcomes are retried with
exponential backoff until the policy's attempt budget is spent, at which
point the last transient failure is surfaced.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from content_generator.domain.entities import (
    AugmentedPrompt,
    ErrorKind,
    FatalFailure,
    GenerationError,
    GenerationOutcome,
    GenerationResult,
    Success,
    TransientFailure,
    UpstreamAttempt,
    UpstreamOutcome,
)
from content_generator.telemetry.structured_logging import log_request_event

if TYPE_CHECKING:
    from content_generator.application.interfaces import UpstreamClientInterface

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60
"""Retry hint returned for upstream rate limiting when the upstream gave none."""

UPSTREAM_ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_REQUEST: "Invalid request format",
    ErrorKind.ACCESS_DENIED: "API access denied. Please contact support.",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded. Please wait a moment and try again.",
    ErrorKind.UPSTREAM_UNAVAILABLE: "Unable to connect to Gemini API. Please try again later.",
    ErrorKind.MALFORMED_UPSTREAM_RESPONSE: "Unexpected response format from Gemini API",
    ErrorKind.INTERNAL: "Internal server error. Please try again.",
}


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Immutable retry policy.

    The delay after the n-th failed attempt (zero-based) is
    ``min(base_delay * backoff_multiplier ** n, max_delay)``.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays cannot be negative")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be at least 1")

    def delay_for(self, attempt_number: int) -> float:
        """Backoff before retrying after zero-based attempt *attempt_number*."""
        return min(self.base_delay * self.backoff_multiplier**attempt_number, self.max_delay)

    def latency_ceiling(self, attempt_timeout: float) -> float:
        """Worst-case seconds one request can spend in the retry loop."""
        backoff = sum(self.delay_for(n) for n in range(self.max_attempts - 1))
        return backoff + self.max_attempts * attempt_timeout


def to_generation_error(failure: TransientFailure | FatalFailure) -> GenerationError:
    """Map an upstream failure to the caller-facing error, keeping its kind."""
    retry_after = None
    if failure.kind is ErrorKind.RATE_LIMITED:
        hint = failure.retry_after_seconds if isinstance(failure, TransientFailure) else None
        retry_after = hint if hint is not None else DEFAULT_RETRY_AFTER_SECONDS
    return GenerationError(
        kind=failure.kind,
        message=UPSTREAM_ERROR_MESSAGES[failure.kind],
        retry_after_seconds=retry_after,
    )


class RetryController:
    """Runs upstream attempts sequentially under a RetryPolicy."""

    __slots__ = ("client", "model_name", "policy", "_sleep")

    def __init__(
        self,
        client: UpstreamClientInterface,
        policy: RetryPolicy | None = None,
        *,
        model_name: str = "gemini-pro",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.policy = policy or RetryPolicy()
        self.model_name = model_name
        self._sleep = sleep

    async def execute(
        self, prompt: AugmentedPrompt, request_id: str | None = None
    ) -> GenerationOutcome:
        """Call the upstream until success, a fatal failure, or exhaustion.

        Args:
            prompt: Augmented prompt, sent unchanged on every attempt.
            request_id: Identifier used in log events.

        Returns:
            GenerationResult on success, otherwise GenerationError. Makes at
            most ``policy.max_attempts`` upstream calls.
        """
        attempts: list[UpstreamAttempt] = []

        async def attempt() -> UpstreamOutcome:
            started_at = datetime.now(UTC)
            outcome = await self.client.send(prompt)
            attempts.append(UpstreamAttempt(len(attempts), started_at, outcome))
            return outcome

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=wait_exponential(
                multiplier=self.policy.base_delay,
                exp_base=self.policy.backoff_multiplier,
                max=self.policy.max_delay,
            ),
            retry=retry_if_result(lambda outcome: isinstance(outcome, TransientFailure)),
            before_sleep=lambda state: self._log_backoff(state, request_id),
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=self._sleep,
        )
        outcome = await retrying(attempt)

        match outcome:
            case Success(content=content):
                result: GenerationOutcome = GenerationResult(
                    content=content,
                    model_name=self.model_name,
                    generated_at=datetime.now(UTC),
                )
            case TransientFailure() | FatalFailure():
                result = to_generation_error(outcome)
            case _:
                raise TypeError(f"Unexpected upstream outcome: {type(outcome).__name__}")

        log_request_event(
            {
                "event": "upstream_retry_loop",
                "request_id": request_id,
                "status": "success" if isinstance(result, GenerationResult) else "error",
                "attempts": len(attempts),
                "error_type": getattr(result, "kind", None),
            }
        )
        return result

    def _log_backoff(self, state: RetryCallState, request_id: str | None) -> None:
        delay = state.next_action.sleep if state.next_action else 0.0
        outcome = state.outcome.result() if state.outcome else None
        logger.warning(
            "upstream_retry: request_id=%s, attempt=%d/%d, kind=%s, sleep=%.2fs",
            request_id,
            state.attempt_number,
            self.policy.max_attempts,
            getattr(outcome, "kind", None),
            delay,
        )


__all__ = [
    "DEFAULT_RETRY_AFTER_SECONDS",
    "RetryController",
    "RetryPolicy",
    "UPSTREAM_ERROR_MESSAGES",
    "to_generation_error",
]
