"""
guarded_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, read once per process (see `get_settings`).
    Defaults are safe for local development only.
    """

    model_config = SettingsConfigDict(env_prefix="GUARD_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev tokens.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "guarded-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "guarded-api"
    jwt_audience: str = "guarded-api-clients"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./guarded.db"

    # Dev/test only: enroll this administrator on startup if missing.
    bootstrap_admin_email: str | None = None
    bootstrap_admin_name: str = "Administrator"

    # List endpoints
    default_page_limit: int = Field(default=20, ge=1)
    max_page_limit: int = Field(default=100, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Per-resource default page sizes live on each ResourceSpec (`query.visibility`);
# `default_page_limit` applies where a resource does not declare one (tasks,
# memberships, notifications).
