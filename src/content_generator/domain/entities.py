"""Domain entities for the Content Generator Service.

Pure domain models for one content-generation round trip: the inbound
request, the augmented prompt sent upstream, the per-attempt outcomes the
upstream client reports, and the final result or error handed back to the
caller.

Design Principles:
    - Immutability: All entities are frozen dataclasses (slots=True)
    - No I/O: Entities contain no file/network operations
    - Framework-agnostic: No FastAPI, Pydantic, or httpx deps

Key Entities:
    - ErrorKind: Stable local error taxonomy
    - GenerationRequest / AugmentedPrompt: What the caller asked for and
      what is actually sent upstream
    - Success / TransientFailure / FatalFailure: Outcome of one upstream call
    - UpstreamAttempt: One entry of a retry loop
    - GenerationResult / GenerationError: Exactly one is produced per request
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TypeAlias

from content_generator.domain.value_objects import Prompt

PROMPT_PREAMBLE = (
    "You are a professional content generator assistant. Create clear, concise, "
    "and professional content based on user requirements. \n\n"
    "User Request: "
)
"""Fixed instructional preamble placed before every user prompt."""

PROMPT_CLOSING = "\n\nPlease provide a well-structured, professional response."
"""Fixed closing instruction placed after every user prompt."""


class ErrorKind(StrEnum):
    """Local error taxonomy.

    Attributes:
        INVALID_REQUEST: Malformed or missing input. Fatal.
        ACCESS_DENIED: Upstream credential or permission problem. Fatal.
        RATE_LIMITED: Local or upstream quota exceeded. Transient.
        UPSTREAM_UNAVAILABLE: Network failure, timeout or upstream 5xx. Transient.
        MALFORMED_UPSTREAM_RESPONSE: Upstream answered 2xx with an unusable
            payload. Fatal.
        INTERNAL: Unclassified fault. Fatal.
    """

    INVALID_REQUEST = "InvalidRequest"
    ACCESS_DENIED = "AccessDenied"
    RATE_LIMITED = "RateLimited"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    MALFORMED_UPSTREAM_RESPONSE = "MalformedUpstreamResponse"
    INTERNAL = "Internal"


@dataclass(slots=True, frozen=True)
class GenerationRequest:
    """Inbound content-generation request.

    Attributes:
        prompt: Validated user prompt.
    """

    prompt: Prompt


@dataclass(slots=True, frozen=True)
class AugmentedPrompt:
    """User prompt wrapped in the fixed instructional preamble.

    The text may carry sensitive user content, so it is excluded from
    ``repr`` and must only ever be logged by length.
    """

    text: str = field(repr=False)

    @classmethod
    def from_request(cls, request: GenerationRequest) -> AugmentedPrompt:
        return cls(f"{PROMPT_PREAMBLE}{request.prompt.value}{PROMPT_CLOSING}")

    def __len__(self) -> int:
        return len(self.text)


@dataclass(slots=True, frozen=True)
class Success:
    """Upstream call returned usable content."""

    content: str


@dataclass(slots=True, frozen=True)
class TransientFailure:
    """Upstream call failed in a way that may succeed if retried unchanged.

    Attributes:
        kind: RATE_LIMITED or UPSTREAM_UNAVAILABLE.
        message: Diagnostic message. Logged, never returned to callers.
        retry_after_seconds: Server-provided retry hint, if any.
    """

    kind: ErrorKind
    message: str
    retry_after_seconds: int | None = None


@dataclass(slots=True, frozen=True)
class FatalFailure:
    """Upstream call failed in a way that will not change on retry."""

    kind: ErrorKind
    message: str


UpstreamOutcome: TypeAlias = Success | TransientFailure | FatalFailure


@dataclass(slots=True, frozen=True)
class UpstreamAttempt:
    """Record of one upstream call inside a single retry loop.

    Attributes:
        attempt_number: Zero-based attempt index.
        started_at: When the attempt began (UTC).
        outcome: What the upstream client reported.
    """

    attempt_number: int
    started_at: datetime
    outcome: UpstreamOutcome


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """Successful generation payload returned to the caller."""

    content: str
    model_name: str
    generated_at: datetime


@dataclass(slots=True, frozen=True)
class GenerationError:
    """Normalized failure returned to the caller.

    Attributes:
        kind: Error category, which determines the HTTP status.
        message: Human-readable message safe to show to end users.
        retry_after_seconds: Seconds the caller should wait before retrying.
            Only set for RATE_LIMITED errors.
    """

    kind: ErrorKind
    message: str
    retry_after_seconds: int | None = None


GenerationOutcome: TypeAlias = GenerationResult | GenerationError
