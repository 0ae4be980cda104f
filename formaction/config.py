"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    save_delay_max: float = Field(
        default=2.0, ge=0, alias="SAVE_DELAY_MAX", description="Seconds"
    )
    action_timeout: float | None = Field(
        default=None,
        gt=0,
        alias="ACTION_TIMEOUT",
        description="Seconds; unset leaves processing unbounded",
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
