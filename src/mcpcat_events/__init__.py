"""Sanitization and size bounding for MCP telemetry events."""

from mcpcat_events.events.capture import capture_exception
from mcpcat_events.events.models import UNDEFINED, Event
from mcpcat_events.events.normalize import normalize
from mcpcat_events.events.pipeline import prepare_event
from mcpcat_events.events.redaction import redact_event
from mcpcat_events.events.sanitization import sanitize_event
from mcpcat_events.events.truncation import truncate_event

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "Event",
    "capture_exception",
    "normalize",
    "prepare_event",
    "redact_event",
    "sanitize_event",
    "truncate_event",
]
