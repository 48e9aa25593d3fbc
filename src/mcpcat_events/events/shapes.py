"""Container detection shared by the sanitizer and the normalizer."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def as_mapping(value: Any) -> Mapping[Any, Any] | None:
    """Return a shallow key/value view of object-like values, else ``None``.

    Mappings are returned as-is. Dataclass instances and pydantic models are
    viewed field by field without copying nested values, so identity-based
    cycle checks keep working on what they reference.
    """
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return dict(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return None


def is_sequence(value: Any) -> bool:
    return isinstance(value, SEQUENCE_TYPES)
