"""
Centralized configuration for Tether.

All settings are loaded from environment variables with sensible defaults.
Provider settings are namespaced (e.g., SUPABASE_*).
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Tether"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "WARNING"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    profiles_table: str = "profiles"

    # Where the magic link sends the user after sign-in
    email_redirect_url: Optional[str] = None

    # Collaborator call policy
    request_timeout_seconds: float = 30.0
    max_load_attempts: int = 3


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
