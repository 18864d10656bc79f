"""Content Generator Service - Gemini-backed content generation API."""

from content_generator.client import AsyncGeminiClient, AsyncGeminiConfig, GenerationParameters
from content_generator.core import (
    Admitted,
    FixedWindowRateLimiter,
    Rejected,
    RetryController,
    RetryPolicy,
    settings,
)
from content_generator.domain import ErrorKind, GenerationError, GenerationResult

__all__ = [
    "Admitted",
    "AsyncGeminiClient",
    "AsyncGeminiConfig",
    "ErrorKind",
    "FixedWindowRateLimiter",
    "GenerationError",
    "GenerationParameters",
    "GenerationResult",
    "Rejected",
    "RetryController",
    "RetryPolicy",
    "settings",
]
