"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gradermarket.domains.search.matcher import DEFAULT_FIELD_WEIGHTS, DEFAULT_FUZZY_THRESHOLD
from gradermarket.domains.search.models import MAX_RESULTS


class Settings(BaseSettings):
    """Application settings."""

    # Paths
    data_dir: Path = Path("data")
    db_path: Path = Path("data/catalog.db")

    # Marketplace catalog API (Express backend)
    catalog_api_url: str = "http://localhost:3000/api"
    catalog_timeout: float = 30.0
    catalog_page_size: int = 100
    catalog_retry_attempts: int = 3
    catalog_retry_backoff: float = 1.0

    # Search
    search_result_limit: int = MAX_RESULTS
    search_fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    search_field_weights: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))
    search_max_query_length: int = 200

    # Rate limiting
    rate_limit_requests: int = 60
    rate_limit_window_seconds: float = 60.0

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
