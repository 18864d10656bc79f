from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from content_generator.api.error_handlers import STATUS_BY_KIND, error_response, status_for
from content_generator.api.models import ErrorResponse
from content_generator.api.response_builders import (
    build_generate_response,
    iso_timestamp,
    outcome_response,
)
from content_generator.domain.entities import ErrorKind, GenerationError, GenerationResult


def test_iso_timestamp_uses_utc_with_z_suffix() -> None:
    moment = datetime(2025, 3, 4, 5, 6, 7, 891_000, tzinfo=UTC)
    assert iso_timestamp(moment) == "2025-03-04T05:06:07.891Z"


def test_iso_timestamp_converts_other_offsets() -> None:
    moment = datetime(2025, 3, 4, 7, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert iso_timestamp(moment) == "2025-03-04T05:00:00.000Z"


def test_build_generate_response() -> None:
    result = GenerationResult(
        content="Hello", model_name="gemini-pro", generated_at=datetime(2025, 1, 1, tzinfo=UTC)
    )
    response = build_generate_response(result)
    assert response.model_dump() == {
        "content": "Hello",
        "model": "gemini-pro",
        "timestamp": "2025-01-01T00:00:00.000Z",
    }


def test_every_error_kind_has_a_status() -> None:
    assert set(STATUS_BY_KIND) == set(ErrorKind)


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (ErrorKind.INVALID_REQUEST, 400),
        (ErrorKind.MALFORMED_UPSTREAM_RESPONSE, 400),
        (ErrorKind.ACCESS_DENIED, 403),
        (ErrorKind.RATE_LIMITED, 429),
        (ErrorKind.UPSTREAM_UNAVAILABLE, 503),
        (ErrorKind.INTERNAL, 500),
    ],
)
def test_status_for(kind: ErrorKind, expected: int) -> None:
    assert status_for(kind) == expected


def test_rate_limited_error_response_has_retry_after() -> None:
    response = error_response(
        GenerationError(ErrorKind.RATE_LIMITED, "Too many requests", retry_after_seconds=42)
    )
    assert response.status_code == 429
    assert response.headers["retry-after"] == "42"
    assert json.loads(response.body) == {"error": "Too many requests", "retryAfter": 42}


def test_error_response_omits_missing_retry_after() -> None:
    response = outcome_response(GenerationError(ErrorKind.INTERNAL, "Internal server error"))
    assert response.status_code == 500
    assert "retry-after" not in response.headers
    assert json.loads(response.body) == {"error": "Internal server error"}


def test_error_model_accepts_wire_name() -> None:
    assert ErrorResponse.model_validate({"error": "x", "retryAfter": 3}).retry_after == 3
