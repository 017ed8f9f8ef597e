"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - Every setting has a default; GENAPI_* environment variables override them

Design Decisions:
    - Settings feed DispatchConfig.from_settings() once at wiring time; the
      request path never reads the environment
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings from GENAPI_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="GENAPI_", env_file=".env", case_sensitive=False,
    )

    # Dispatch
    mask_internal_errors: bool = False

    # Documentation
    docs_language: str = "en"
    docs_indent: int = 8

    # Sample server
    api_prefix: str = "/v1"
    host: str = "localhost"
    port: int = 8080

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("api_prefix", mode="before")
    @classmethod
    def normalise_prefix(cls, v: str) -> str:
        """Accept "v1", "/v1" or "/v1/"; store "/v1"."""
        if isinstance(v, str):
            v = "/" + v.strip("/") if v.strip("/") else ""
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
