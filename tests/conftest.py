"""
Pytest configuration and fixtures for Content Generator Service tests.
"""

import sys
from pathlib import Path

import pytest

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from content_generator.domain.entities import AugmentedPrompt
from tests.helpers import RecordingSleep

GEMINI_SUCCESS_BODY = {
    "candidates": [
        {
            "content": {
                "parts": [{"text": "Dear team, the launch moves to Friday."}],
                "role": "model",
            },
            "finishReason": "STOP",
        }
    ]
}


@pytest.fixture
def recording_sleep():
    """Sleep replacement that records requested delays without waiting."""
    return RecordingSleep()


@pytest.fixture
def augmented_prompt():
    """A small augmented prompt."""
    return AugmentedPrompt("Write a follow-up email about the launch date.")


@pytest.fixture
def gemini_success_body():
    """A well-formed generateContent response body."""
    return GEMINI_SUCCESS_BODY
