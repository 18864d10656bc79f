"""
Behavioral tests for domain entities and value objects.
"""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime

import pytest

from content_generator.domain import (
    AugmentedPrompt,
    ErrorKind,
    GenerationRequest,
    InvalidPromptError,
    Prompt,
)
from content_generator.domain.entities import (
    PROMPT_CLOSING,
    PROMPT_PREAMBLE,
    FatalFailure,
    GenerationError,
    Success,
    TransientFailure,
    UpstreamAttempt,
)


class TestPrompt:
    def test_accepts_regular_text(self):
        prompt = Prompt("Summarize the quarterly numbers")
        assert prompt.value == "Summarize the quarterly numbers"
        assert len(prompt) == len("Summarize the quarterly numbers")

    @pytest.mark.parametrize("value", ["", "   ", "\n\t "])
    def test_rejects_empty_or_blank(self, value):
        with pytest.raises(InvalidPromptError, match="Prompt is required"):
            Prompt(value)

    @pytest.mark.parametrize("raw", [None, 42, ["text"], {"text": "x"}, True])
    def test_parse_rejects_non_strings(self, raw):
        with pytest.raises(InvalidPromptError, match="Prompt is required"):
            Prompt.parse(raw)

    def test_parse_keeps_text_verbatim(self):
        raw = "  keep my   spacing  "
        assert Prompt.parse(raw).value == raw

    def test_is_immutable(self):
        prompt = Prompt("hello")
        with pytest.raises(FrozenInstanceError):
            prompt.value = "changed"  # type: ignore[misc]


class TestAugmentedPrompt:
    def test_wraps_user_prompt_in_fixed_preamble(self):
        request = GenerationRequest(Prompt("Draft a LinkedIn post"))
        augmented = AugmentedPrompt.from_request(request)

        assert augmented.text.startswith(PROMPT_PREAMBLE)
        assert augmented.text.endswith(PROMPT_CLOSING)
        assert "Draft a LinkedIn post" in augmented.text
        assert len(augmented) == len(PROMPT_PREAMBLE) + len("Draft a LinkedIn post") + len(
            PROMPT_CLOSING
        )

    def test_repr_hides_prompt_text(self):
        augmented = AugmentedPrompt("secret customer details")
        assert "secret customer details" not in repr(augmented)


class TestOutcomes:
    def test_error_kind_wire_names(self):
        assert [kind.value for kind in ErrorKind] == [
            "InvalidRequest",
            "AccessDenied",
            "RateLimited",
            "UpstreamUnavailable",
            "MalformedUpstreamResponse",
            "Internal",
        ]

    def test_outcomes_compare_by_value(self):
        assert Success("text") == Success("text")
        assert TransientFailure(ErrorKind.RATE_LIMITED, "slow down", 5) != TransientFailure(
            ErrorKind.RATE_LIMITED, "slow down", 6
        )
        assert FatalFailure(ErrorKind.ACCESS_DENIED, "no") == FatalFailure(
            ErrorKind.ACCESS_DENIED, "no"
        )

    def test_transient_failure_hint_defaults_to_none(self):
        assert TransientFailure(ErrorKind.UPSTREAM_UNAVAILABLE, "down").retry_after_seconds is None

    def test_upstream_attempt_records_outcome(self):
        started = datetime.now(UTC)
        attempt = UpstreamAttempt(0, started, Success("ok"))
        assert attempt.attempt_number == 0
        assert attempt.started_at is started
        assert attempt.outcome == Success("ok")

    def test_generation_error_is_immutable(self):
        error = GenerationError(ErrorKind.INTERNAL, "boom")
        with pytest.raises(FrozenInstanceError):
            error.kind = ErrorKind.RATE_LIMITED  # type: ignore[misc]
