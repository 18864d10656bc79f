"""Interfaces (Protocols) for application layer dependencies.

The application layer depends on these structural interfaces, not on the
concrete httpx client, limiter or retry controller, so tests can swap in
fakes without patching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from content_generator.core.rate_limit import AdmissionDecision
    from content_generator.domain.entities import (
        AugmentedPrompt,
        GenerationOutcome,
        UpstreamOutcome,
    )


class UpstreamClientInterface(Protocol):
    """One upstream generation attempt.

    Implementations must classify every upstream or network failure into a
    TransientFailure or FatalFailure and return it rather than raise.
    """

    async def send(self, prompt: AugmentedPrompt) -> UpstreamOutcome: ...


class RateLimiterInterface(Protocol):
    """Admission control keyed by client identity."""

    async def admit(self, client_key: str) -> AdmissionDecision: ...


class GenerationExecutorInterface(Protocol):
    """Bounded retry loop around the upstream client."""

    async def execute(
        self, prompt: AugmentedPrompt, request_id: str | None = None
    ) -> GenerationOutcome: ...


__all__ = [
    "GenerationExecutorInterface",
    "RateLimiterInterface",
    "UpstreamClientInterface",
]
