"""Customer-supplied redaction of sensitive strings in events."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from typing import Any, Callable

from mcpcat_events.errors import RedactionError
from mcpcat_events.events.models import UNDEFINED, WIRE_NAMES, Event
from mcpcat_events.events.shapes import as_mapping, is_sequence

RedactFunction = Callable[[str], str]

# System identifiers and metadata kept verbatim for analytics.
PROTECTED_FIELDS = frozenset(
    {
        "id",
        "sessionId",
        "projectId",
        "server",
        "identifyActorGivenId",
        "identifyActorName",
        "identifyData",
        "resourceName",
        "eventType",
        "actorId",
    }
)


def _redact(value: Any, redact: RedactFunction, field: str) -> Any:
    if value is None or isinstance(value, (bool, int, float, datetime, date, time)):
        return value
    if isinstance(value, str):
        try:
            return redact(value)
        except Exception as exc:
            raise RedactionError(f"Redaction failed for field {field}: {exc}", field=field) from exc
    if is_sequence(value):
        return [_redact(item, redact, field) for item in value]
    mapping = as_mapping(value)
    if mapping is not None:
        return {
            key: _redact(item, redact, field)
            for key, item in mapping.items()
            if item is not UNDEFINED and not callable(item)
        }
    return value


def redact_event(event: Event, redact: RedactFunction) -> Event:
    """Return a copy of ``event`` with ``redact`` applied to every string.

    Protected identifier fields are left as they are. Models, dataclasses and
    other mappings come back as dicts, and tuples and sets as lists. Mapping
    entries holding callables or ``UNDEFINED`` are dropped. Raises ``RedactionError`` if the
    callback fails.
    """
    changes: dict[str, Any] = {}
    for name, wire in WIRE_NAMES.items():
        if wire in PROTECTED_FIELDS:
            continue
        value = getattr(event, name)
        if value is None:
            continue
        try:
            changes[name] = _redact(value, redact, wire)
        except RecursionError as exc:
            raise RedactionError(
                f"Field {wire} is cyclic or nested too deeply to redact", field=wire
            ) from exc
    return dataclasses.replace(event, **changes)
