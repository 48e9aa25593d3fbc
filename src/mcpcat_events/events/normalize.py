"""Recursive normalization of caller-controlled values.

Turns an arbitrary Python value into a tree that ``json.dumps`` accepts as-is:
bounded depth and breadth, strings capped, cycles broken, and values JSON has
no representation for replaced by descriptive markers.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from mcpcat_events.events.limits import (
    MAX_BREADTH,
    MAX_DEPTH,
    MAX_SAFE_INTEGER,
    MAX_STRING_LENGTH,
    TRUNCATION_SUFFIX,
)
from mcpcat_events.events.models import UNDEFINED
from mcpcat_events.events.shapes import as_mapping, is_sequence

UNDEFINED_MARKER = "[undefined]"
CIRCULAR_MARKER = "[Circular ~]"
MAX_PROPERTIES_MARKER = "[MaxProperties ~]"
MAX_PROPERTIES_KEY = "..."
OBJECT_MARKER = "[Object]"
ARRAY_MARKER = "[Array]"


def truncate_string(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + TRUNCATION_SUFFIX


def normalize(
    value: Any,
    depth: int = MAX_DEPTH,
    max_breadth: int = MAX_BREADTH,
    max_string_length: int = MAX_STRING_LENGTH,
) -> Any:
    """Return a bounded, acyclic, JSON-serializable copy of ``value``.

    ``depth`` counts container levels: a container met with no depth left
    becomes ``"[Object]"`` or ``"[Array]"``. Each container keeps at most
    ``max_breadth`` entries followed by a ``"[MaxProperties ~]"`` sentinel.
    Only containers on the current recursion path count as cycles, so a
    subtree shared by two siblings is rendered twice.
    """
    return _visit(value, depth, max_breadth, max_string_length, set())


def _visit(
    value: Any,
    remaining_depth: int,
    max_breadth: int,
    max_string_length: int,
    active: set[int],
) -> Any:
    if value is None:
        return None
    if value is UNDEFINED:
        return UNDEFINED_MARKER
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
            return int(value)
        return _bigint_marker(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "[NaN]"
        if math.isinf(value):
            return "[Infinity]" if value > 0 else "[-Infinity]"
        return float(value)
    if isinstance(value, str):
        return truncate_string(value, max_string_length)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return f"[Symbol({value})]"
    if type(value) is object:
        return "[Symbol()]"

    mapping = as_mapping(value)
    if mapping is not None or is_sequence(value):
        key = id(value)
        if key in active:
            return CIRCULAR_MARKER
        if remaining_depth <= 0:
            return OBJECT_MARKER if mapping is not None else ARRAY_MARKER

        active.add(key)
        try:
            if mapping is not None:
                return _visit_mapping(
                    mapping, remaining_depth - 1, max_breadth, max_string_length, active
                )
            return _visit_sequence(
                value, remaining_depth - 1, max_breadth, max_string_length, active
            )
        finally:
            active.discard(key)

    if callable(value):
        name = getattr(value, "__name__", None)
        if not isinstance(name, str) or not name or name == "<lambda>":
            name = "<anonymous>"
        return f"[Function: {name}]"

    return truncate_string(_safe_str(value), max_string_length)


def _visit_sequence(
    items: Any,
    remaining_depth: int,
    max_breadth: int,
    max_string_length: int,
    active: set[int],
) -> list[Any]:
    result: list[Any] = []
    for index, item in enumerate(items):
        if index >= max_breadth:
            result.append(MAX_PROPERTIES_MARKER)
            break
        result.append(_visit(item, remaining_depth, max_breadth, max_string_length, active))
    return result


def _visit_mapping(
    mapping: Any,
    remaining_depth: int,
    max_breadth: int,
    max_string_length: int,
    active: set[int],
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    count = 0
    for key, item in mapping.items():
        if count >= max_breadth:
            result[MAX_PROPERTIES_KEY] = MAX_PROPERTIES_MARKER
            break
        # Absent entries are omitted, as a JSON encoder omits undefined members.
        if item is UNDEFINED:
            continue
        name = truncate_string(_key(key), max_string_length)
        result[name] = _visit(item, remaining_depth, max_breadth, max_string_length, active)
        count += 1
    return result


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return _safe_str(key)


def _bigint_marker(value: int) -> str:
    try:
        return f"[BigInt: {value}]"
    except ValueError:
        # Beyond the interpreter's int-to-str digit limit.
        return f"[BigInt: {value.bit_length()} bits]"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"[Unserializable: {type(value).__name__}]"
