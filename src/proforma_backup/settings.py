"""
proforma_backup.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide credentials embedded in the database URL from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PROFORMA_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "proforma-backup"
    log_level: str = "INFO"
    # JSON for log shipping; set false for human-readable console output.
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Persistence
    database_url: str = Field(default="sqlite+aiosqlite:///./proforma_backup.db", repr=False)

    # Connection resilience
    connect_max_attempts: int = Field(default=5, ge=1)
    connect_retry_interval_seconds: float = Field(default=5.0, ge=0)

    # Request plumbing
    max_body_bytes: int = 50 * 1024 * 1024
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Operational inspection endpoint (/debug-proformas).
    debug_endpoints: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# List-valued settings (cors_allow_origins) are read from env as JSON, e.g.
# PROFORMA_CORS_ALLOW_ORIGINS='["https://app.example.com"]'.
