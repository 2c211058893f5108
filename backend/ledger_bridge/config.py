"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Engine credentials come from environment variables or .env (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults for every setting: the sandbox engine runs out of the box
    - engine_call_timeout_seconds <= 0 disables the per-call deadline
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # HTTP
    host: str = "0.0.0.0"
    port: int = 5000
    cors_allow_origin: str = "*"

    # Accounting engine
    engine_backend: str = "memory"
    engine_data_path: str = ""
    engine_username: str = "manager"
    engine_password: str = ""
    engine_call_timeout_seconds: float | None = 60.0

    @field_validator("engine_call_timeout_seconds", mode="after")
    @classmethod
    def disable_non_positive_timeout(cls, v: float | None) -> float | None:
        if v is None or v <= 0:
            return None
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
