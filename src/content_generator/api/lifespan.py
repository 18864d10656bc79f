"""Application lifespan management.

Lifespan Responsibilities:
    - Startup:
        1. Build the upstream client from settings (credential, timeout,
           fixed generation parameters)
        2. Build the rate limiter and retry controller
        3. Register them for dependency injection
    - Shutdown:
        1. Close the upstream HTTP connection pool
        2. Clear registered dependencies

A missing upstream credential is logged but does not prevent startup;
generation requests then fail with AccessDenied from the upstream.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from content_generator.api.dependencies import clear_dependencies, set_dependencies
from content_generator.client import AsyncGeminiClient, AsyncGeminiConfig, GenerationParameters
from content_generator.core.config import settings
from content_generator.core.rate_limit import FixedWindowRateLimiter
from content_generator.core.resilience import RetryController, RetryPolicy

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan_context(app: FastAPI):
    """Manage application lifespan (startup and shutdown).

    Args:
        app: FastAPI application instance.

    Yields:
        None. Control is yielded to the application for request handling.
    """
    logger.info("LIFESPAN: Starting Content Generator API (%s)", settings.api.environment)

    gemini = settings.gemini
    if gemini.api_key is None:
        logger.warning("LIFESPAN: GEMINI_API_KEY is not set; upstream calls will be rejected")

    client = AsyncGeminiClient(
        AsyncGeminiConfig(
            api_url=gemini.api_url,
            api_key=gemini.api_key.get_secret_value() if gemini.api_key else None,
            timeout=gemini.timeout,
            max_prompt_chars=gemini.max_prompt_chars,
            parameters=GenerationParameters(
                temperature=gemini.temperature,
                top_k=gemini.top_k,
                top_p=gemini.top_p,
                max_output_tokens=gemini.max_output_tokens,
            ),
        )
    )
    policy = RetryPolicy(
        max_attempts=settings.retry.max_attempts,
        base_delay=settings.retry.base_delay,
        backoff_multiplier=settings.retry.backoff_multiplier,
        max_delay=settings.retry.max_delay,
    )
    rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit.max_requests,
        window_seconds=settings.rate_limit.window_seconds,
    )
    set_dependencies(
        rate_limiter,
        RetryController(client, policy, model_name=gemini.reported_model),
    )
    logger.info(
        "LIFESPAN: Retry policy max_attempts=%d, latency ceiling %.1fs",
        policy.max_attempts,
        policy.latency_ceiling(gemini.timeout),
    )
    logger.info(
        "LIFESPAN: Rate limiting %d requests per %ds per client",
        rate_limiter.max_requests,
        rate_limiter.window_seconds,
    )

    yield

    logger.info("LIFESPAN: Shutting down Content Generator API")
    clear_dependencies()
    try:
        await client.close()
    except Exception as exc:
        logger.warning("Error closing upstream client: %s", exc)
