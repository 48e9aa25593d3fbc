"""Event truncation.

Bounds the size of an event in three passes:

1. Field-level limits on known metadata strings, ``error.message``,
   ``error.frames`` and text content blocks.
2. Recursive normalization of the caller-controlled payloads.
3. If the serialized event is still over ``MAX_EVENT_BYTES``, re-normalize at
   decreasing depth, then shorten the largest remaining strings.

Most events pass through the third step untouched. The byte ceiling is a soft
guarantee: an event with almost no long strings and a huge number of small
values can still exceed it, in which case the smallest candidate found is
returned and a warning is logged. Mapping keys are capped at the string
limit during normalization but never shortened further, so many long keys
can also keep an event over the ceiling.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Collection
from typing import Any

from mcpcat_events.events.limits import (
    MAX_CONTENT_TEXT_LENGTH,
    MAX_DEPTH,
    MAX_ERROR_MESSAGE_LENGTH,
    MAX_EVENT_BYTES,
    MAX_METADATA_LENGTH,
    MAX_RESOURCE_NAME_LENGTH,
    MAX_STACK_FRAMES,
    MAX_USER_INTENT_LENGTH,
    TRUNCATION_SUFFIX,
)
from mcpcat_events.events.models import PAYLOAD_FIELDS, WIRE_NAMES, Event
from mcpcat_events.events.normalize import normalize, truncate_string
from mcpcat_events.events.serialization import json_byte_size
from mcpcat_events.events.shapes import as_mapping

logger = logging.getLogger(__name__)

_FIELD_LIMITS = {
    "user_intent": MAX_USER_INTENT_LENGTH,
    "resource_name": MAX_RESOURCE_NAME_LENGTH,
    "server_name": MAX_METADATA_LENGTH,
    "server_version": MAX_METADATA_LENGTH,
    "client_name": MAX_METADATA_LENGTH,
    "client_version": MAX_METADATA_LENGTH,
}

# Largest-field surgery tuning.
_SURGERY_ATTEMPTS = 10
_SURGERY_MIN_STRING_LENGTH = 100
_SURGERY_MIN_REDUCTION = 10
_SURGERY_OVERHEAD_BYTES = 200

_PAYLOAD_WIRE_NAMES = frozenset(WIRE_NAMES[name] for name in PAYLOAD_FIELDS)


def window_frames(frames: list[Any], limit: int = MAX_STACK_FRAMES) -> list[Any]:
    """Keep the oldest and newest halves of a frame list longer than ``limit``."""
    if len(frames) <= limit:
        return frames
    half = limit // 2
    return [*frames[:half], *frames[-half:]]


def _limit_error(error: Any) -> Any:
    if not isinstance(error, dict):
        return error
    result = dict(error)
    message = result.get("message")
    if isinstance(message, str):
        result["message"] = truncate_string(message, MAX_ERROR_MESSAGE_LENGTH)
    frames = result.get("frames")
    if isinstance(frames, list):
        result["frames"] = window_frames(frames)
    return result


def _limit_content(response: Any) -> Any:
    fields = as_mapping(response)
    if fields is None or not isinstance(fields.get("content"), (list, tuple)):
        return response
    blocks = []
    for block in fields["content"]:
        block_fields = as_mapping(block)
        if (
            block_fields is not None
            and block_fields.get("type") == "text"
            and isinstance(block_fields.get("text"), str)
            and len(block_fields["text"]) > MAX_CONTENT_TEXT_LENGTH
        ):
            text = truncate_string(block_fields["text"], MAX_CONTENT_TEXT_LENGTH)
            block = {**block_fields, "text": text}
        blocks.append(block)
    return {**fields, "content": blocks}


def apply_field_limits(event: Event) -> Event:
    changes: dict[str, Any] = {}
    for name, limit in _FIELD_LIMITS.items():
        value = getattr(event, name)
        if isinstance(value, str):
            changes[name] = truncate_string(value, limit)
    changes["error"] = _limit_error(event.error)
    changes["response"] = _limit_content(event.response)
    return dataclasses.replace(event, **changes)


def normalize_payloads(event: Event, depth: int = MAX_DEPTH) -> Event:
    changes = {
        name: normalize(getattr(event, name), depth)
        for name in PAYLOAD_FIELDS
        if getattr(event, name) is not None
    }
    return dataclasses.replace(event, **changes)


_StringPaths = list[tuple[tuple[Any, ...], int]]


def _collect_strings(node: Any, path: tuple[Any, ...], found: _StringPaths) -> None:
    if isinstance(node, str):
        if len(node) > _SURGERY_MIN_STRING_LENGTH:
            found.append((path, len(node)))
    elif isinstance(node, list):
        for index, item in enumerate(node):
            _collect_strings(item, (*path, index), found)
    elif isinstance(node, dict):
        for key, item in node.items():
            _collect_strings(item, (*path, key), found)


def _parent(root: Any, path: tuple[Any, ...]) -> Any:
    node = root
    for step in path[:-1]:
        node = node[step]
    return node


def shrink_largest_strings(
    data: dict[str, Any],
    max_bytes: int = MAX_EVENT_BYTES,
    descend_into: Collection[str] | None = None,
) -> dict[str, Any]:
    """Shorten the longest strings in ``data`` in place until it fits ``max_bytes``.

    Each pass trims the longest strings first, each by at most half its
    length, until the byte excess (plus an allowance for the added suffixes)
    is covered. Stops after a fixed number of passes or when nothing long
    enough is left to trim. When ``descend_into`` is given, only top-level
    strings and the containers under those keys are touched.
    """
    for _ in range(_SURGERY_ATTEMPTS):
        size = json_byte_size(data)
        if size <= max_bytes:
            break

        found: _StringPaths = []
        for key, item in data.items():
            if descend_into is None or isinstance(item, str) or key in descend_into:
                _collect_strings(item, (key,), found)
        if not found:
            break
        # Stable sort keeps traversal order among equal lengths.
        found.sort(key=lambda entry: entry[1], reverse=True)

        remaining = size - max_bytes + _SURGERY_OVERHEAD_BYTES
        shortened = False
        for path, length in found:
            if remaining <= 0:
                break
            reduction = min(remaining, length // 2)
            if reduction < _SURGERY_MIN_REDUCTION:
                continue
            parent = _parent(data, path)
            parent[path[-1]] = parent[path[-1]][: length - reduction] + TRUNCATION_SUFFIX
            remaining -= reduction
            shortened = True

        if not shortened:
            break
    return data


def fit_to_budget(event: Event) -> Event:
    size = json_byte_size(event)
    if size <= MAX_EVENT_BYTES:
        return event

    logger.info(
        "Event %s exceeds %d bytes (%d bytes), reducing depth",
        event.id or "unknown",
        MAX_EVENT_BYTES,
        size,
    )
    for depth in range(MAX_DEPTH - 1, 0, -1):
        candidate = normalize_payloads(event, depth)
        size = json_byte_size(candidate)
        if size <= MAX_EVENT_BYTES:
            return candidate
        logger.debug("Event still %d bytes at depth=%d", size, depth)

    # normalize() output is a fresh tree, so shrinking the payloads in place is safe.
    minimal = normalize_payloads(event, 1)
    shrunk = shrink_largest_strings(minimal.to_dict(), descend_into=_PAYLOAD_WIRE_NAMES)
    result = Event.from_dict(shrunk)
    size = json_byte_size(result)
    if size > MAX_EVENT_BYTES:
        logger.warning(
            "Event %s still %d bytes after truncation; sending best-effort result",
            event.id or "unknown",
            size,
        )
    return result


def truncate_event(event: Event | None) -> Event | None:
    """Return a copy of ``event`` bounded to ``MAX_EVENT_BYTES`` when serialized.

    Never mutates the original event; ``None`` passes through.
    """
    if event is None:
        return None
    limited = apply_field_limits(event)
    return fit_to_budget(normalize_payloads(limited))
