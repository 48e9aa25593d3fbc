import pytest

from mcpcat_events.config import get_settings

_SETTINGS_ENV = ("APP_ENV", "LOG_LEVEL", "LOG_JSON", "LOG_FILE")


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch):
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
