"""Telemetry helpers (structured request logging)."""

from content_generator.telemetry.structured_logging import log_request_event, redact_event

__all__ = ["log_request_event", "redact_event"]
