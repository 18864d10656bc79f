"""Structured logging utilities for the Content Generator Service.

This module provides JSON-based structured logging for request/response
events. All events are written in JSON Lines (JSONL) format to a log file
for easy parsing and analysis.

Key Features:
    - JSON Lines Format: One JSON object per line for easy parsing
    - Automatic Timestamps: Injected if not present in event data
    - Prompt Redaction: Prompt text never reaches the log file, only its length
    - Isolation: Non-propagating logger to avoid duplicate logs

Log File Configuration:
    - Location: ``logs/requests.jsonl`` (relative to project root)
    - Format: JSON Lines (one JSON object per line)
    - Encoding: UTF-8

Event Schema:
    All events should include:
        - event: Event type identifier (e.g., "api_request", "upstream_request")
        - timestamp: ISO 8601 timestamp (auto-injected if missing)
        - Additional fields: request_id, status, latency_ms, error_type, ...
"""

from __future__ import annotations

import functools
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

_REDACTED_FIELDS = frozenset({"prompt", "augmented_prompt"})


@functools.cache
def _get_logs_dir() -> Path:
    """Get logs directory, creating it if needed."""
    logs_dir = Path(__file__).resolve().parents[3] / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir


LOGS_DIR = _get_logs_dir()

REQUEST_LOGGER = logging.getLogger("content_generator.requests")
if not REQUEST_LOGGER.handlers:
    REQUEST_LOGGER.setLevel(logging.INFO)
    handler = logging.FileHandler(LOGS_DIR / "requests.jsonl", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    REQUEST_LOGGER.addHandler(handler)
    REQUEST_LOGGER.propagate = False


def _json_default(value: Any) -> Any:
    """Fallback serializer for datetime, Path and other objects."""
    match value:
        case datetime():
            return TypeAdapter(datetime).dump_python(value, mode="json")
        case Path():
            return str(value)
        case _:
            return str(value)


def redact_event(event: dict[str, Any]) -> dict[str, Any]:
    """Replace prompt text with its character count.

    Returns:
        The same dict, mutated in place.
    """
    for key in _REDACTED_FIELDS & event.keys():
        value = event.pop(key)
        event[f"{key}_chars"] = len(value) if isinstance(value, str) else None
    return event


def log_request_event(event: dict[str, Any]) -> None:
    """Emit a structured request event.

    Args:
        event: Event payload dictionary. Should contain ``event`` and
            ``status`` keys. Any ``prompt``/``augmented_prompt`` value is
            replaced by its length before writing.

    Side Effects:
        - Writes one JSON line to logs/requests.jsonl
        - Adds ``timestamp`` to the event if missing (mutates input dict)

    Example:
        >>> log_request_event({
        ...     "event": "api_request",
        ...     "operation": "generate",
        ...     "status": "success",
        ...     "latency_ms": 1234.56,
        ... })
    """
    event.setdefault("timestamp", datetime.now(UTC).isoformat())
    redact_event(event)
    REQUEST_LOGGER.info(json.dumps(event, default=_json_default))


__all__ = ["LOGS_DIR", "log_request_event", "redact_event"]
