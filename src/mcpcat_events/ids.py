"""Identifier helpers.

Event ids sort by creation time: a prefix, eight hex digits of Unix seconds,
then 24 random hex digits.
"""

import time
from uuid import uuid4

EVENT_ID_PREFIX = "evt"


def new_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time()):08x}{uuid4().hex[:24]}"


def new_event_id() -> str:
    return new_id(EVENT_ID_PREFIX)
