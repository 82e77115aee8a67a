"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None

    # Store backend: "memory" keeps everything in process, "sql" uses database_url
    store_backend: Literal["memory", "sql"] = "memory"

    # Catalog snapshot cache TTL (seconds)
    catalog_cache_ttl_seconds: int = 300

    # Load the bundled fixture catalog into the in-memory backend
    seed_fixture_catalog: bool = True

    # Pricing
    stale_tolerance: float = 0.01
    default_exchange_rate: float = 83.0
    secondary_currency: str = "INR"

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
