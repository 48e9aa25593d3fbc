"""Canonical JSON form of an event, used for size accounting and transport."""

from __future__ import annotations

import json
import math
from datetime import date, datetime, time
from typing import Any

from mcpcat_events.events.models import Event


def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    try:
        return str(value)
    except Exception:
        return f"[Unserializable: {type(value).__name__}]"


def _finite(value: Any) -> Any:
    # Non-finite floats outside the normalized payloads render as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def to_json(value: Any) -> str:
    """Serialize an event (or any normalized tree) to compact JSON text."""
    if isinstance(value, Event):
        value = {key: _finite(item) for key, item in value.to_dict().items()}
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_default)


def json_byte_size(value: Any) -> int:
    """UTF-8 byte length of the canonical JSON form."""
    return len(to_json(value).encode("utf-8", errors="surrogatepass"))
