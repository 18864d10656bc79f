"""Response builders for API endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi.responses import JSONResponse

from content_generator.api.error_handlers import error_response
from content_generator.api.models import GenerateResponse
from content_generator.domain.entities import GenerationOutcome, GenerationResult


def iso_timestamp(moment: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with a trailing Z."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_generate_response(result: GenerationResult) -> GenerateResponse:
    """Convert a GenerationResult into the public success envelope."""
    return GenerateResponse(
        content=result.content,
        model=result.model_name,
        timestamp=iso_timestamp(result.generated_at),
    )


def outcome_response(outcome: GenerationOutcome) -> JSONResponse:
    """Render either outcome of a generation request."""
    match outcome:
        case GenerationResult():
            return JSONResponse(content=build_generate_response(outcome).model_dump())
        case _:
            return error_response(outcome)


__all__ = ["build_generate_response", "iso_timestamp", "outcome_response"]
