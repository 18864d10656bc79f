"""Upstream API client for the Content Generator Service."""

from content_generator.client.async_client import (
    AsyncGeminiClient,
    AsyncGeminiConfig,
    GenerationParameters,
    classify_response,
)

__all__ = [
    "AsyncGeminiClient",
    "AsyncGeminiConfig",
    "GenerationParameters",
    "classify_response",
]
