import json
from datetime import UTC, datetime

from mcpcat_events.events.models import UNDEFINED, Event
from mcpcat_events.events.serialization import json_byte_size, to_json


def test_to_dict_uses_wire_names_and_omits_none() -> None:
    event = Event(
        session_id="ses_1",
        event_type="mcp:tools/call",
        identify_actor_data={"plan": "pro"},
        mcpcat_version="0.1.0",
        is_error=False,
    )
    assert event.to_dict() == {
        "sessionId": "ses_1",
        "eventType": "mcp:tools/call",
        "mcpcatVersion": "0.1.0",
        "identifyActorData": {"plan": "pro"},
        "isError": False,
    }


def test_from_dict_accepts_both_spellings() -> None:
    event = Event.from_dict(
        {"sessionId": "ses_1", "event_type": "custom", "userIntent": "hi", "unknown": 1}
    )
    assert event == Event(session_id="ses_1", event_type="custom", user_intent="hi")


def test_round_trip_keeps_values() -> None:
    ts = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
    event = Event(session_id="ses_1", event_type="custom", timestamp=ts, parameters=[1, 2])
    assert Event.from_dict(event.to_dict()) == event


def test_undefined_is_falsy_and_distinct_from_none() -> None:
    assert not UNDEFINED
    assert UNDEFINED is not None
    assert repr(UNDEFINED) == "UNDEFINED"


def test_to_json_is_compact_and_renders_dates() -> None:
    ts = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
    event = Event(session_id="ses_1", event_type="custom", timestamp=ts, duration=float("nan"))
    text = to_json(event)
    assert text == (
        '{"sessionId":"ses_1","eventType":"custom",'
        '"timestamp":"2025-01-15T12:00:00+00:00","duration":null}'
    )
    assert json.loads(text)["timestamp"] == "2025-01-15T12:00:00+00:00"


def test_byte_size_counts_utf8() -> None:
    assert json_byte_size("é") == len('"é"'.encode("utf-8"))
    assert json_byte_size({"a": "日本"}) == len('{"a":"日本"}'.encode("utf-8"))


def test_byte_size_tolerates_lone_surrogates() -> None:
    assert json_byte_size("\ud800") == 5
