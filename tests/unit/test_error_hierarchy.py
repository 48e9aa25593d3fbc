"""Tests for error hierarchy."""

from mcpcat_events.errors import ConfigError, McpcatError, RedactionError


def test_hierarchy() -> None:
    assert issubclass(RedactionError, McpcatError)
    assert issubclass(ConfigError, McpcatError)


def test_redaction_error_carries_field() -> None:
    err = RedactionError("failed", field="parameters")
    assert str(err) == "failed"
    assert err.field == "parameters"
    assert RedactionError("x").field is None


def test_catch_as_base_error() -> None:
    try:
        raise ConfigError("bad level")
    except McpcatError as exc:
        assert str(exc) == "bad level"
