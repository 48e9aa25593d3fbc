"""Event preparation: redaction, sanitization and truncation in order."""

from __future__ import annotations

import dataclasses
import logging

import structlog

from mcpcat_events.errors import RedactionError
from mcpcat_events.events.models import Event
from mcpcat_events.events.redaction import RedactFunction, redact_event
from mcpcat_events.events.sanitization import sanitize_event
from mcpcat_events.events.truncation import truncate_event
from mcpcat_events.ids import new_event_id

logger = logging.getLogger(__name__)


def prepare_event(event: Event, redact: RedactFunction | None = None) -> Event | None:
    """Make ``event`` safe to hand to an exporter.

    Returns ``None`` when the customer redaction callback fails; such events
    are dropped rather than sent unredacted.
    """
    if not event.id:
        event = dataclasses.replace(event, id=new_event_id())

    with structlog.contextvars.bound_contextvars(event_id=event.id, event_type=event.event_type):
        if redact is not None:
            try:
                event = redact_event(event, redact)
            except RedactionError as exc:
                logger.warning("Failed to redact event %s, dropping it: %s", event.id, exc)
                return None
        return truncate_event(sanitize_event(event))
