"""Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - default_page_size is always > 0

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - FETCHVIEW_ prefix keeps the library's variables apart from the host application's
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fetchview.core.domain_types import DEFAULT_PAGE_SIZE


class Settings(BaseSettings):
    """Library settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FETCHVIEW_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Transport
    base_url: str = ""
    timeout_seconds: float = 30.0

    # Pagination
    default_page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("default_page_size")
    @classmethod
    def positive_page_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("default_page_size must be > 0")
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
