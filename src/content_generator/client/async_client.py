"""Asynchronous client for the upstream generative-language API.

This module performs exactly one ``generateContent`` call per ``send()`` and
classifies whatever comes back (response, network error or timeout) into a
normalized outcome. It never retries and never raises for upstream
failures; retry decisions belong to the caller.

Key behaviors:
    - Uses httpx.AsyncClient with a shared connection pool
    - Fixed generation parameters taken from static configuration
    - Credential sent in the ``x-goog-api-key`` header, never in the URL
    - Bounded per-attempt timeout (expiry is a transient failure)
    - Classification is a pure function of status, headers and body

Classification:
    - 2xx with ``candidates[0].content.parts[0].text`` -> Success
    - 429 -> TransientFailure(RateLimited), with any retry hint
    - 401/403 -> FatalFailure(AccessDenied)
    - other 4xx -> FatalFailure(InvalidRequest)
    - 5xx, connection error, timeout -> TransientFailure(UpstreamUnavailable)
    - 2xx with unusable payload, or any other status -> FatalFailure(MalformedUpstreamResponse)
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import re
import time
import types
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

import httpx

from content_generator.domain.entities import (
    AugmentedPrompt,
    ErrorKind,
    FatalFailure,
    Success,
    TransientFailure,
    UpstreamOutcome,
)
from content_generator.telemetry.structured_logging import log_request_event

logger = logging.getLogger(__name__)

DEFAULT_API_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
)
API_KEY_HEADER = "x-goog-api-key"
_RETRY_INFO_TYPE = "type.googleapis.com/google.rpc.RetryInfo"
_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)s\s*$")


@dataclass(slots=True, frozen=True)
class GenerationParameters:
    """Fixed sampling parameters sent as ``generationConfig``."""

    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024

    def to_payload(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }


@dataclass(slots=True, frozen=True)
class AsyncGeminiConfig:
    """Configuration for the asynchronous upstream client.

    Immutable configuration object. All time values are in seconds.

    Attributes:
        api_url: Full ``generateContent`` endpoint URL.
        api_key: Upstream credential. None sends no credential header.
        timeout: Per-attempt timeout covering the whole call.
        max_prompt_chars: Longest prompt sent upstream. Longer prompts are
            rejected without a network call.
        parameters: Fixed generation parameters.
        max_connections: Maximum number of pooled connections.
        max_keepalive_connections: Maximum keep-alive connections.
        transport: Custom httpx transport (None = real network).
    """

    api_url: str = DEFAULT_API_URL
    api_key: str | None = field(default=None, repr=False)
    timeout: float = 30.0
    max_prompt_chars: int = 120_000
    parameters: GenerationParameters = field(default_factory=GenerationParameters)
    max_connections: int = 50
    max_keepalive_connections: int = 20
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)


class AsyncGeminiClient:
    """Single-attempt client for the upstream ``generateContent`` endpoint.

    Can be used as an async context manager for automatic resource cleanup.
    The underlying httpx client is created lazily on first use.

    Thread safety:
        Safe for concurrent use from multiple async tasks; the client keeps
        no per-request state.
    """

    __slots__ = ("client", "config")

    def __init__(self, config: AsyncGeminiConfig | None = None) -> None:
        self.config = config or AsyncGeminiConfig()
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> AsyncGeminiClient:
        await self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create the pooled httpx client if not already created."""
        if self.client is None:
            timeout = httpx.Timeout(self.config.timeout, connect=min(self.config.timeout, 5.0))
            limits = httpx.Limits(
                max_keepalive_connections=self.config.max_keepalive_connections,
                max_connections=self.config.max_connections,
            )
            self.client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                transport=self.config.transport,
            )
        return self.client

    async def close(self) -> None:
        """Close the httpx client. Safe to call multiple times."""
        if self.client:
            await self.client.aclose()
            self.client = None

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Build the JSON body for one generation call."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.config.parameters.to_payload(),
        }

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers[API_KEY_HEADER] = self.config.api_key
        return headers

    async def send(self, prompt: AugmentedPrompt) -> UpstreamOutcome:
        """Perform one upstream generation call.

        Args:
            prompt: Augmented prompt to send verbatim.

        Returns:
            Success, TransientFailure or FatalFailure. Upstream and network
            failures are returned, not raised.

        Side effects:
            - Makes one HTTP POST request (unless the prompt is oversized)
            - Logs a structured ``upstream_request`` event (prompt length only)
        """
        request_id = str(uuid.uuid4())
        if len(prompt) > self.config.max_prompt_chars:
            outcome: UpstreamOutcome = FatalFailure(
                ErrorKind.INVALID_REQUEST,
                f"Prompt is {len(prompt):,} characters; limit is "
                f"{self.config.max_prompt_chars:,}",
            )
            self._log_outcome(request_id, prompt, outcome, None, 0.0)
            return outcome

        client = await self._ensure_client()
        start_time = time.perf_counter()
        status_code: int | None = None

        try:
            async with asyncio.timeout(self.config.timeout):
                response = await client.post(
                    self.config.api_url,
                    json=self.build_payload(prompt.text),
                    headers=self._headers(),
                )
        except (TimeoutError, httpx.TimeoutException):
            outcome = TransientFailure(
                ErrorKind.UPSTREAM_UNAVAILABLE,
                f"Upstream call timed out after {self.config.timeout}s",
            )
        except httpx.RequestError as exc:
            outcome = TransientFailure(
                ErrorKind.UPSTREAM_UNAVAILABLE,
                f"Unable to reach upstream: {exc.__class__.__name__}",
            )
        else:
            status_code = response.status_code
            outcome = classify_response(status_code, response.headers, response.content)

        latency_ms = (time.perf_counter() - start_time) * 1000
        self._log_outcome(request_id, prompt, outcome, status_code, latency_ms)
        return outcome

    def _log_outcome(
        self,
        request_id: str,
        prompt: AugmentedPrompt,
        outcome: UpstreamOutcome,
        status_code: int | None,
        latency_ms: float,
    ) -> None:
        event: dict[str, Any] = {
            "event": "upstream_request",
            "operation": "generate",
            "request_id": request_id,
            "prompt_chars": len(prompt),
            "upstream_status": status_code,
            "latency_ms": round(latency_ms, 3),
        }
        match outcome:
            case Success(content=content):
                event.update(status="success", content_chars=len(content))
            case TransientFailure(kind=kind, message=message) | FatalFailure(
                kind=kind, message=message
            ):
                event.update(
                    status="error",
                    error_type=kind.value,
                    error_message=message,
                    transient=isinstance(outcome, TransientFailure),
                )
                logger.warning(
                    "upstream_failure: request_id=%s, status=%s, kind=%s, error=%s",
                    request_id,
                    status_code,
                    kind.value,
                    message,
                )
        log_request_event(event)


def classify_response(
    status_code: int,
    headers: Mapping[str, str],
    body: bytes,
) -> UpstreamOutcome:
    """Map a raw upstream response to a normalized outcome.

    Pure function: the same status, headers and body always map to the
    same outcome.
    """
    match status_code:
        case code if 200 <= code < 300:
            return _classify_success(body)
        case HTTPStatus.TOO_MANY_REQUESTS:
            return TransientFailure(
                ErrorKind.RATE_LIMITED,
                _upstream_error_message(status_code, body),
                parse_retry_hint(headers, body),
            )
        case HTTPStatus.UNAUTHORIZED | HTTPStatus.FORBIDDEN:
            return FatalFailure(
                ErrorKind.ACCESS_DENIED, _upstream_error_message(status_code, body)
            )
        case code if 400 <= code < 500:
            return FatalFailure(
                ErrorKind.INVALID_REQUEST, _upstream_error_message(status_code, body)
            )
        case code if 500 <= code < 600:
            return TransientFailure(
                ErrorKind.UPSTREAM_UNAVAILABLE, _upstream_error_message(status_code, body)
            )
        case _:
            return FatalFailure(
                ErrorKind.MALFORMED_UPSTREAM_RESPONSE,
                f"Unexpected upstream status {status_code}",
            )


def _classify_success(body: bytes) -> UpstreamOutcome:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return FatalFailure(
            ErrorKind.MALFORMED_UPSTREAM_RESPONSE, "Upstream returned a non-JSON body"
        )

    content = extract_content(data)
    if content is None:
        return FatalFailure(
            ErrorKind.MALFORMED_UPSTREAM_RESPONSE,
            "Upstream payload has no candidates[0].content.parts[0].text",
        )
    return Success(content)


def extract_content(data: Any) -> str | None:
    """Return the first candidate's first text part, or None if absent or blank."""
    match data:
        case {"candidates": [{"content": {"parts": [{"text": str(text)}, *_]}}, *_]} if (
            text.strip()
        ):
            return text
        case _:
            return None


def parse_retry_hint(headers: Mapping[str, str], body: bytes) -> int | None:
    """Extract a retry delay in whole seconds from a 429 response.

    Checks the ``Retry-After`` header first (delta-seconds form), then a
    ``google.rpc.RetryInfo`` entry in ``error.details`` of the JSON body.
    """
    header = headers.get("retry-after")
    if header is not None:
        try:
            seconds = float(header)
        except ValueError:
            seconds = None
        if seconds is not None and math.isfinite(seconds) and seconds >= 0:
            return math.ceil(seconds)

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None

    match data:
        case {"error": {"details": [*details]}}:
            for detail in details:
                match detail:
                    case {"@type": str(kind), "retryDelay": str(delay)} if (
                        kind == _RETRY_INFO_TYPE
                    ):
                        matched = _DURATION_PATTERN.match(delay)
                        if matched:
                            return math.ceil(float(matched.group(1)))
    return None


def _upstream_error_message(status_code: int, body: bytes) -> str:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None
    match data:
        case {"error": {"message": str(message)}}:
            return f"Upstream error ({status_code}): {message}"
        case _:
            return f"Upstream error ({status_code})"


__all__ = [
    "API_KEY_HEADER",
    "AsyncGeminiClient",
    "AsyncGeminiConfig",
    "GenerationParameters",
    "classify_response",
    "extract_content",
    "parse_retry_hint",
]
