"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a THROWRES_-prefixed environment variable
    - get_settings() is cached (lru_cache): single instance per process
    - Log levels are validated at load time, never at first log call

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: the demo app runs with no environment
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="THROWRES_", env_file=".env", case_sensitive=False,
    )

    # API
    app_title: str = "throwres demo API"
    # No browser frontend ships with the demo; set THROWRES_CORS_ORIGINS to allow one
    cors_origins: list[str] = []

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Level at which DispatchInterceptor logs each dispatched signal
    signal_log_level: str = "DEBUG"

    @field_validator("log_level", "signal_log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def check_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
