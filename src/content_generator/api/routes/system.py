"""System routes for health and diagnostics.

Endpoints:
    GET /api/health
        - Response: HealthResponse (status, version, model, features)
        - Rate Limited: No

    GET /api/test
        - Response: DiagnosticResponse (liveness message, deployment mode)
        - Rate Limited: No
"""

from __future__ import annotations

from fastapi import APIRouter

from content_generator.api.models import DiagnosticResponse, HealthResponse
from content_generator.api.response_builders import iso_timestamp
from content_generator.core.config import settings

router = APIRouter()

FEATURES = ["secure-api-key", "rate-limiting", "retry-logic"]


@router.get("/health", tags=["System"], response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report service status and enabled features."""
    return HealthResponse(
        status="OK",
        timestamp=iso_timestamp(),
        version=settings.api.version,
        model=settings.gemini.reported_model,
        features=FEATURES,
        environment=settings.api.environment,
    )


@router.get("/test", tags=["System"], response_model=DiagnosticResponse)
async def diagnostic() -> DiagnosticResponse:
    """Liveness check that does not touch the upstream API."""
    return DiagnosticResponse(
        message="Gemini API server is running!",
        timestamp=iso_timestamp(),
        secure=True,
        environment=settings.api.environment,
    )
