"""Runtime configuration for logging around the event pipeline.

Event size limits are constants in ``mcpcat_events.events.limits`` and are
deliberately absent here.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcpcat_events.errors import ConfigError

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    log_json: bool | None = Field(alias="LOG_JSON", default=None)
    log_file: str = Field(alias="LOG_FILE", default="")


def validate_settings(settings: Settings) -> None:
    level = settings.log_level.strip().upper()
    if level not in _VALID_LOG_LEVELS:
        raise ConfigError(
            f"LOG_LEVEL must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}; "
            f"got {settings.log_level!r}"
        )
    if settings.app_env == "prod" and settings.log_json is False:
        logging.getLogger(__name__).warning(
            "LOG_JSON=0 in production; console-formatted logs are hard to ingest"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
