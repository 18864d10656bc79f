"""Pydantic models for the Content Generator HTTP API.

Request and response bodies for every JSON endpoint, plus the per-request
context used for logging. Field names follow the public JSON contract
(``retryAfter`` is camelCase on the wire).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request body for ``POST /api/generate``.

    ``prompt`` is accepted as any JSON value here; the domain layer decides
    whether it is a usable prompt so every rejection uses the same message.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: Any = Field(None, description="Text describing the content to generate")


class GenerateResponse(BaseModel):
    """Success envelope for ``POST /api/generate``."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(..., description="Generated content")
    model: str = Field(..., description="Model that produced the content")
    timestamp: str = Field(..., description="ISO 8601 generation time (UTC)")


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint.

    Attributes:
        error: Human-readable error message.
        retry_after: Seconds to wait before retrying. Serialized as
            ``retryAfter`` and only present for rate-limit errors.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    error: str = Field(..., description="Error message")
    retry_after: int | None = Field(
        None, alias="retryAfter", description="Seconds to wait before retrying"
    )

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    """Response model for ``GET /api/health``."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["OK"] = Field("OK", description="Service status")
    timestamp: str = Field(..., description="ISO 8601 server time (UTC)")
    version: str = Field(..., description="API version")
    model: str = Field(..., description="Model name reported in generation responses")
    features: list[str] = Field(..., description="Enabled service features")
    environment: Literal["vercel", "local"] = Field(..., description="Deployment mode")


class DiagnosticResponse(BaseModel):
    """Response model for ``GET /api/test``."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., description="Liveness message")
    timestamp: str = Field(..., description="ISO 8601 server time (UTC)")
    secure: bool = Field(..., description="Upstream credential is held server-side")
    environment: Literal["vercel", "local"] = Field(..., description="Deployment mode")


@dataclass(slots=True, frozen=True)
class RequestContext:
    """Context for tracking API requests.

    Attributes:
        request_id: Unique request identifier (UUID string).
        client_ip: Client address, also the rate-limit key.
        user_agent: User-Agent header value. None if not present.
    """

    request_id: str
    client_ip: str
    user_agent: str | None = None


__all__ = [
    "DiagnosticResponse",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
    "HealthResponse",
    "RequestContext",
]
