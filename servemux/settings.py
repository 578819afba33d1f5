import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from servemux.constants import (
    DEFAULT_HOST, ENV_PREFIX, LISTENER_MUX, LISTENER_SIMPLE,
    LOG_LEVEL, MUX_HTTP_PORT, SIMPLE_HTTP_PORT,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ListenerSettings(BaseSettings):
    """
    Runtime settings for a listener.

    Attributes:
        host (str): Address to bind.
        port (int): TCP port to bind; 0 picks a free port.
        log_level (str): Root logging level.
    """
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    host: str = DEFAULT_HOST
    port: int = Field(default=MUX_HTTP_PORT, ge=0, le=65535)
    log_level: str = LOG_LEVEL

    @field_validator('log_level')
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = str(value).upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {value}")
        return value

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level)


class MuxSettings(ListenerSettings):
    """Settings for the routing listener (env prefix SERVEMUX_MUX_)."""
    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}MUX_")

    port: int = Field(default=MUX_HTTP_PORT, ge=0, le=65535)


class SimpleSettings(ListenerSettings):
    """Settings for the single-route listener (env prefix SERVEMUX_SIMPLE_)."""
    model_config = SettingsConfigDict(env_prefix=f"{ENV_PREFIX}SIMPLE_")

    port: int = Field(default=SIMPLE_HTTP_PORT, ge=0, le=65535)


SETTINGS_CLASSES = {
    LISTENER_MUX: MuxSettings,
    LISTENER_SIMPLE: SimpleSettings,
}


def get_settings(listener: str, **overrides) -> ListenerSettings:
    """
    Build the settings for `listener`.

    Explicit overrides win over environment variables, which win over the
    defaults. Overrides set to None are ignored so unset CLI flags fall
    through.
    """
    cls = SETTINGS_CLASSES[listener]
    return cls(**{k: v for k, v in overrides.items() if v is not None})
