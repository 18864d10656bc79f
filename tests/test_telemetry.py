"""
Behavioral tests for structured request logging.
"""

import json
from unittest.mock import patch

from content_generator.telemetry import log_request_event, redact_event
from content_generator.telemetry.structured_logging import LOGS_DIR, REQUEST_LOGGER


class TestRedactEvent:
    def test_prompt_replaced_by_length(self):
        event = redact_event({"event": "api_request", "prompt": "confidential plan"})
        assert "prompt" not in event
        assert event["prompt_chars"] == len("confidential plan")

    def test_augmented_prompt_replaced_by_length(self):
        event = redact_event({"augmented_prompt": "abc"})
        assert event == {"augmented_prompt_chars": 3}

    def test_non_string_prompt_has_no_length(self):
        assert redact_event({"prompt": None}) == {"prompt_chars": None}

    def test_other_fields_untouched(self):
        event = {"event": "http_request", "path": "/api/health"}
        assert redact_event(dict(event)) == event


class TestLogRequestEvent:
    def test_writes_one_json_line_without_prompt_text(self):
        with patch.object(REQUEST_LOGGER, "info") as info:
            log_request_event(
                {"event": "api_request", "status": "success", "prompt": "do not log me"}
            )

        info.assert_called_once()
        line = info.call_args.args[0]
        payload = json.loads(line)
        assert payload["event"] == "api_request"
        assert payload["prompt_chars"] == len("do not log me")
        assert "do not log me" not in line
        assert "timestamp" in payload

    def test_keeps_existing_timestamp(self):
        with patch.object(REQUEST_LOGGER, "info") as info:
            log_request_event({"event": "x", "timestamp": "2025-01-01T00:00:00Z"})
        assert json.loads(info.call_args.args[0])["timestamp"] == "2025-01-01T00:00:00Z"

    def test_serializes_non_json_values(self):
        from datetime import UTC, datetime

        with patch.object(REQUEST_LOGGER, "info") as info:
            log_request_event({"event": "x", "at": datetime(2025, 1, 1, tzinfo=UTC)})
        assert json.loads(info.call_args.args[0])["at"].startswith("2025-01-01T00:00:00")

    def test_request_logger_is_isolated(self):
        assert REQUEST_LOGGER.propagate is False
        assert LOGS_DIR.is_dir()
