"""Content sanitization for outgoing events.

Strips content the telemetry backend cannot store (images, audio, binary
resources, large base64 blobs) and replaces it with descriptive text so the
event still records that something was there.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from datetime import date, datetime, time
from typing import Any, Callable

from mcpcat_events.events.limits import BASE64_SIZE_GATE
from mcpcat_events.events.models import Event
from mcpcat_events.events.shapes import as_mapping

logger = logging.getLogger(__name__)

# Heuristic: an alphanumeric-only string also matches, but the size gate makes
# false positives unlikely for real text.
BASE64_PATTERN = re.compile(r"[A-Za-z0-9+/\n\r]+=*")

IMAGE_REDACTED = "[image content redacted - not supported by MCPcat]"
AUDIO_REDACTED = "[audio content redacted - not supported by MCPcat]"
BLOB_RESOURCE_REDACTED = "[binary resource content redacted - not supported by MCPcat]"
BINARY_DATA_REDACTED = "[binary data redacted - not supported by MCPcat]"
TOO_DEEP_REDACTED = "[content too deeply nested - redacted by MCPcat]"

_PASSTHROUGH_BLOCK_TYPES = {"text", "resource_link"}
_STRUCTURED_CONTENT_KEYS = ("structuredContent", "structured_content")


def unsupported_type_redacted(type_name: Any) -> str:
    return f'[unsupported content type "{type_name}" redacted - not supported by MCPcat]'


def _text_block(text: str) -> dict[str, str]:
    return {"type": "text", "text": text}


def looks_like_base64_blob(value: str) -> bool:
    return len(value) >= BASE64_SIZE_GATE and BASE64_PATTERN.fullmatch(value) is not None


def scan_for_base64(value: Any) -> Any:
    """Return a copy of ``value`` with large base64-looking strings redacted.

    Containers are copied with a memo, so shared subtrees stay shared and
    cycles come out as cycles for the normalizer to flag.
    """
    return _scan(value, {})


def _scan(value: Any, memo: dict[int, Any]) -> Any:
    if value is None or isinstance(value, (bool, int, float, datetime, date, time)):
        return value
    if isinstance(value, str):
        return BINARY_DATA_REDACTED if looks_like_base64_blob(value) else value
    if isinstance(value, (bytes, bytearray)):
        return BINARY_DATA_REDACTED if len(value) >= BASE64_SIZE_GATE else value

    key = id(value)
    if key in memo:
        return memo[key]

    if isinstance(value, list):
        items: list[Any] = []
        memo[key] = items
        items.extend(_scan(item, memo) for item in value)
        return items

    if isinstance(value, (tuple, set, frozenset)):
        # Immutable containers cannot be registered before their members are
        # built; a cycle back into one resolves to the original object.
        memo[key] = value
        scanned = [_scan(item, memo) for item in value]
        memo[key] = tuple(scanned) if isinstance(value, tuple) else type(value)(scanned)
        return memo[key]

    mapping = as_mapping(value)
    if mapping is not None:
        out: dict[Any, Any] = {}
        memo[key] = out
        for name, item in mapping.items():
            out[name] = _scan(item, memo)
        return out

    return value


def _sanitize_content_block(block: Any) -> Any:
    fields = as_mapping(block)
    if fields is None:
        return block

    block_type = fields.get("type")
    if block_type in _PASSTHROUGH_BLOCK_TYPES:
        return block
    if block_type == "image":
        return _text_block(IMAGE_REDACTED)
    if block_type == "audio":
        return _text_block(AUDIO_REDACTED)
    if block_type == "resource":
        resource = as_mapping(fields.get("resource"))
        if resource is not None and "blob" in resource:
            return _text_block(BLOB_RESOURCE_REDACTED)
        return block
    return _text_block(unsupported_type_redacted(block_type))


def _sanitize_response(response: Any) -> Any:
    fields = as_mapping(response)
    if fields is None:
        return response

    result = dict(fields)
    content = result.get("content")
    if isinstance(content, (list, tuple)):
        result["content"] = [_sanitize_content_block(block) for block in content]
        redacted = sum(
            1 for before, after in zip(content, result["content"]) if before is not after
        )
        if redacted:
            logger.debug("Redacted %d unsupported content block(s)", redacted)

    for name in _STRUCTURED_CONTENT_KEYS:
        structured = result.get(name)
        if structured is not None and not isinstance(structured, str):
            result[name] = scan_for_base64(structured)
    return result


def _guarded(event: Event, name: str, sanitize: Callable[[Any], Any], value: Any) -> Any:
    try:
        return sanitize(value)
    except RecursionError:
        logger.warning(
            "Field %s of event %s is nested beyond the recursion limit; redacting it",
            name,
            event.id or "unknown",
        )
        return TOO_DEEP_REDACTED


def sanitize_event(event: Event | None) -> Event | None:
    """Return a sanitized copy of ``event`` with binary content stripped.

    - Replaces image, audio, unknown and blob-resource blocks in
      ``response["content"]`` with text blocks naming what was removed
    - Redacts large base64 strings in ``parameters``, ``structuredContent``,
      ``identify_actor_data`` and ``error``
    - Never mutates the original event; ``None`` passes through
    """
    if event is None:
        return None

    changes: dict[str, Any] = {}
    if event.response is not None:
        changes["response"] = _guarded(event, "response", _sanitize_response, event.response)
    for name in ("parameters", "identify_actor_data", "error"):
        value = getattr(event, name)
        if value is not None:
            changes[name] = _guarded(event, name, scan_for_base64, value)

    return dataclasses.replace(event, **changes)
