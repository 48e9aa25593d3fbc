"""Structured error capture for tool-call failures.

Turns an exception (or whatever a tool handler produced instead of a result)
into the ``ErrorData`` payload carried in ``Event.error``.
"""

from __future__ import annotations

import json
import os
import sysconfig
import traceback
from pathlib import Path
from typing import Any

from mcpcat_events.events.models import ChainedErrorData, ErrorData, StackFrame
from mcpcat_events.events.truncation import window_frames

MAX_EXCEPTION_CHAIN_DEPTH = 10
UNKNOWN_ERROR_TYPE = "UnknownErrorType"
PLATFORM = "python"

_LIBRARY_MARKERS = ("site-packages", "dist-packages")


def _library_roots() -> tuple[str, ...]:
    roots = set()
    for key in ("stdlib", "platstdlib", "purelib", "platlib"):
        path = sysconfig.get_paths().get(key)
        if path:
            roots.add(path)
            roots.add(str(Path(path).resolve()))
    return tuple(sorted(roots))


_LIBRARY_ROOTS = _library_roots()


def is_in_app(abs_path: str) -> bool:
    """True for frames from the host project, false for stdlib and installed packages."""
    if not abs_path or abs_path.startswith("<"):
        return False
    parts = Path(abs_path).parts
    if any(marker in parts for marker in _LIBRARY_MARKERS):
        return False
    return not abs_path.startswith(_LIBRARY_ROOTS)


def make_relative_path(abs_path: str) -> str:
    """Shorten ``abs_path`` so identical code groups together across machines.

    Installed packages keep their import path below ``site-packages``; other
    files are made relative to the working directory or the home directory.
    """
    if not abs_path or abs_path.startswith("<"):
        return abs_path or "<unknown>"

    normalized = abs_path.replace("\\", "/")
    for marker in _LIBRARY_MARKERS:
        token = f"/{marker}/"
        index = normalized.rfind(token)
        if index != -1:
            return normalized[index + len(token) :]

    cwd = os.getcwd().replace("\\", "/").rstrip("/") + "/"
    if normalized.startswith(cwd):
        return normalized[len(cwd) :]

    home = str(Path.home()).replace("\\", "/").rstrip("/") + "/"
    if home != "/" and normalized.startswith(home):
        return "~/" + normalized[len(home) :]

    return normalized.lstrip("/")


def _frame(summary: traceback.FrameSummary) -> StackFrame:
    in_app = is_in_app(summary.filename)
    frame: StackFrame = {
        "filename": make_relative_path(summary.filename),
        "abs_path": summary.filename,
        "function": summary.name or "<module>",
        "in_app": in_app,
    }
    if summary.lineno is not None:
        frame["lineno"] = summary.lineno
    colno = getattr(summary, "colno", None)
    if colno is not None:
        frame["colno"] = colno + 1
    if in_app and summary.line:
        frame["context_line"] = summary.line
    return frame


def _frames(exc: BaseException) -> list[StackFrame]:
    return window_frames([_frame(summary) for summary in traceback.extract_tb(exc.__traceback__)])


def _stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc, chain=False))


def _message(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__}>"


def _next_in_chain(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def _unwrap_chain(exc: BaseException) -> list[ChainedErrorData]:
    chained: list[ChainedErrorData] = []
    seen = {id(exc)}
    current = _next_in_chain(exc)
    while current is not None and len(chained) < MAX_EXCEPTION_CHAIN_DEPTH:
        if id(current) in seen:
            break
        seen.add(id(current))
        entry: ChainedErrorData = {"message": _message(current), "type": type(current).__name__}
        if current.__traceback__ is not None:
            entry["stack"] = _stack(current)
            entry["frames"] = _frames(current)
        chained.append(entry)
        current = _next_in_chain(current)
    return chained


def _field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return getattr(value, name, None)


def is_call_tool_result(value: Any) -> bool:
    """True for MCP ``CallToolResult`` shapes (dict or model) flagged as errors."""
    if isinstance(value, BaseException):
        return False
    if isinstance(value, dict):
        if "isError" not in value or "content" not in value:
            return False
    elif not (hasattr(value, "isError") and hasattr(value, "content")):
        return False
    return isinstance(_field(value, "content"), list)


def _call_tool_result_message(result: Any) -> str:
    texts = [
        str(_field(block, "text"))
        for block in _field(result, "content")
        if _field(block, "type") == "text" and _field(block, "text") is not None
    ]
    return " ".join(texts).strip() or "Unknown error"


def stringify_non_error(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return str(value)
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        try:
            return str(value)
        except Exception:
            return f"<unprintable {type(value).__name__}>"


def capture_exception(error: Any) -> ErrorData:
    """Build ``ErrorData`` for an exception, a tool error result, or any other value."""
    if is_call_tool_result(error):
        # The SDK already flattened the exception; only its text survives.
        return {
            "message": _call_tool_result_message(error),
            "type": UNKNOWN_ERROR_TYPE,
            "platform": PLATFORM,
        }

    if not isinstance(error, BaseException):
        return {"message": stringify_non_error(error), "type": None, "platform": PLATFORM}

    data: ErrorData = {
        "message": _message(error),
        "type": type(error).__name__,
        "platform": PLATFORM,
    }
    if error.__traceback__ is not None:
        data["stack"] = _stack(error)
        data["frames"] = _frames(error)

    chained = _unwrap_chain(error)
    if chained:
        data["chained_errors"] = chained
    return data
