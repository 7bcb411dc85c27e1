"""
Application settings using Pydantic.

Provides environment-based configuration loading with CATALOG_MANAGER_ prefix.
"""

from functools import lru_cache
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CATALOG_MANAGER_",
    )

    # Database
    database_url: str = "postgresql+psycopg://localhost/catalog_manager"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    # Debug
    debug: bool = False
    log_level: LogLevel = "INFO"

    # Server
    bind_address: str = "0.0.0.0:8080"

    # API
    api_prefix: str = "/api/v1alpha1"
    cors_origins: list[str] = []

    # Pagination
    default_page_size: int = 50
    max_page_size: int = 100

    # Service types accepted from callers; seeded extension types bypass this
    allowed_service_types: list[str] = ["vm", "container", "cluster", "db"]

    # Seed the demo service type and catalog item at startup
    seed_on_startup: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
