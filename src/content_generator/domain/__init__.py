"""Domain layer for the Content Generator Service.

Pure domain models, value objects, and the error taxonomy. No dependencies
on frameworks, infrastructure, or outer layers.
"""

from content_generator.domain.entities import (
    AugmentedPrompt,
    ErrorKind,
    FatalFailure,
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
    Success,
    TransientFailure,
    UpstreamAttempt,
    UpstreamOutcome,
)
from content_generator.domain.exceptions import (
    DomainError,
    InvalidPromptError,
    InvalidRequestError,
)
from content_generator.domain.value_objects import Prompt

__all__ = [
    "AugmentedPrompt",
    "DomainError",
    "ErrorKind",
    "FatalFailure",
    "GenerationError",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationResult",
    "InvalidPromptError",
    "InvalidRequestError",
    "Prompt",
    "Success",
    "TransientFailure",
    "UpstreamAttempt",
    "UpstreamOutcome",
]
