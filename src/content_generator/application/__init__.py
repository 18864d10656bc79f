"""Application layer for the Content Generator Service.

Use cases and the Protocol interfaces they depend on.
"""

from content_generator.application.interfaces import (
    GenerationExecutorInterface,
    RateLimiterInterface,
    UpstreamClientInterface,
)
from content_generator.application.use_cases import GenerateContentUseCase

__all__ = [
    "GenerateContentUseCase",
    "GenerationExecutorInterface",
    "RateLimiterInterface",
    "UpstreamClientInterface",
]
