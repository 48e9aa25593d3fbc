"""Event model definitions."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping, NotRequired, TypedDict


class _Undefined:
    """Marker for a value that is explicitly absent, as opposed to ``None``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


class StackFrame(TypedDict):
    filename: str
    function: str
    in_app: bool
    abs_path: NotRequired[str]
    lineno: NotRequired[int]
    colno: NotRequired[int]
    context_line: NotRequired[str]


class ChainedErrorData(TypedDict):
    message: str
    type: str
    stack: NotRequired[str]
    frames: NotRequired[list[StackFrame]]


class ErrorData(TypedDict):
    message: str
    type: NotRequired[str | None]
    platform: NotRequired[str]
    stack: NotRequired[str]
    frames: NotRequired[list[StackFrame]]
    chained_errors: NotRequired[list[ChainedErrorData]]


@dataclass(slots=True)
class Event:
    session_id: str
    event_type: str
    id: str | None = None
    project_id: str | None = None
    timestamp: datetime | None = None
    duration: float | None = None

    ip_address: str | None = None
    sdk_language: str | None = None
    mcpcat_version: str | None = None
    server_name: str | None = None
    server_version: str | None = None
    client_name: str | None = None
    client_version: str | None = None

    identify_actor_given_id: str | None = None
    identify_actor_name: str | None = None
    identify_actor_data: Any = None

    resource_name: str | None = None
    parameters: Any = None
    response: Any = None
    user_intent: str | None = None

    is_error: bool | None = None
    error: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire mapping: camelCase keys, ``None`` fields omitted."""
        out: dict[str, Any] = {}
        for name, wire in WIRE_NAMES.items():
            value = getattr(self, name)
            if value is not None:
                out[wire] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an event from wire (camelCase) or attribute (snake_case) keys."""
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ATTRIBUTE_NAMES.get(key)
            if name is not None:
                kwargs[name] = value
        kwargs.setdefault("session_id", None)
        kwargs.setdefault("event_type", None)
        return cls(**kwargs)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


WIRE_NAMES: dict[str, str] = {f.name: _camel(f.name) for f in fields(Event)}
_ATTRIBUTE_NAMES: dict[str, str] = {
    **{name: name for name in WIRE_NAMES},
    **{wire: name for name, wire in WIRE_NAMES.items()},
}

# Attributes holding caller-controlled trees of arbitrary shape.
PAYLOAD_FIELDS = ("parameters", "response", "identify_actor_data", "error")
