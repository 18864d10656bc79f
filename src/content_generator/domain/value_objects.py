"""Value objects for the Content Generator Service.

Immutable, self-validating wrappers around primitive domain values.
"""

from __future__ import annotations

from dataclasses import dataclass

from content_generator.domain.exceptions import InvalidPromptError

PROMPT_REQUIRED_MESSAGE = "Prompt is required"


@dataclass(slots=True, frozen=True)
class Prompt:
    """Value object representing a user prompt.

    Attributes:
        value: Prompt text. Must be a non-empty, non-whitespace string.

    Raises:
        InvalidPromptError: If the prompt is missing, not a string, or blank.

    Note:
        Length limits are enforced by the upstream client against the
        augmented prompt, since that is what the upstream API receives.
    """

    value: str

    @classmethod
    def parse(cls, raw: object) -> Prompt:
        """Build a Prompt from an untrusted JSON value."""
        if not isinstance(raw, str):
            raise InvalidPromptError(PROMPT_REQUIRED_MESSAGE)
        return cls(raw)

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise InvalidPromptError(PROMPT_REQUIRED_MESSAGE)

    def __len__(self) -> int:
        return len(self.value)
