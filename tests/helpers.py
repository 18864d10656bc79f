"""Reusable test utilities and helpers for Content Generator Service tests.

This module provides fakes for the upstream client and the
backoff sleep, plus FastAPI dependency override helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from httpx import Response

from content_generator.api.dependencies import get_rate_limiter, get_retry_controller
from content_generator.api.routes.frontend import get_static_root
from content_generator.core.rate_limit import FixedWindowRateLimiter
from content_generator.core.resilience import RetryController
from content_generator.domain.entities import AugmentedPrompt, UpstreamOutcome


class ScriptedUpstream:
    """Upstream client fake that replays outcomes in order.

    The last outcome repeats once the script is used up.
    """

    def __init__(self, *outcomes: UpstreamOutcome) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[AugmentedPrompt] = []

    async def send(self, prompt: AugmentedPrompt) -> UpstreamOutcome:
        self.calls.append(prompt)
        if len(self._outcomes) > 1:
            return self._outcomes.pop(0)
        return self._outcomes[0]


class RecordingSleep:
    """Awaitable sleep replacement that records delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def setup_dependency_overrides(
    app: FastAPI,
    rate_limiter: FixedWindowRateLimiter,
    retry_controller: RetryController,
    static_root: Path | None = None,
) -> None:
    """Set up FastAPI dependency overrides for testing.

    Args:
        app: FastAPI application instance.
        rate_limiter: Limiter charged by the generation route.
        retry_controller: Retry controller wrapping a fake upstream.
        static_root: Front-end directory. None keeps the configured one.
    """
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_retry_controller] = lambda: retry_controller
    if static_root is not None:
        app.dependency_overrides[get_static_root] = lambda: static_root


def cleanup_dependency_overrides(app: FastAPI) -> None:
    """Clean up FastAPI dependency overrides after testing."""
    app.dependency_overrides.clear()


def assert_response_structure(response: Response, expected_status: int = 200) -> dict[str, Any]:
    """Assert response has expected status and return JSON data.

    Raises:
        AssertionError: If status code doesn't match or response isn't JSON.
    """
    assert response.status_code == expected_status, (
        f"Expected status {expected_status}, got {response.status_code}. "
        f"Response: {response.text}"
    )
    assert response.headers.get("content-type", "").startswith("application/json")
    return response.json()


def assert_error_response(
    response: Response,
    expected_status: int,
    expected_message: str | None = None,
) -> dict[str, Any]:
    """Assert the response is an ``{error, retryAfter?}`` envelope."""
    data = assert_response_structure(response, expected_status)
    assert "error" in data, "Error response missing 'error' key"
    assert set(data) <= {"error", "retryAfter"}
    if expected_message is not None:
        assert data["error"] == expected_message
    return data
