"""
dealership_inventory.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, seeded admin password).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `DEALERSHIP_`).

    Defaults are safe for local dev; production must override the JWT secret
    and the seeded administrator password.
    """

    model_config = SettingsConfigDict(env_prefix="DEALERSHIP_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "dealership-inventory"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    slow_request_ms: int = 5000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "dealership-inventory"
    jwt_audience: str = "dealership-api"
    jwt_secret: str = Field(default="dev-secret-change-me-please-0123456789", repr=False)
    jwt_expiration_hours: int = Field(default=24, ge=1)
    allow_self_registration: bool = True

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./dealership.db"

    # Demo data (manufacturers + administrator account)
    seed_demo_data: bool = True
    admin_username: str = "admin"
    admin_email: str = "admin@autostock.com"
    admin_password: str = Field(default="Admin123!", repr=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on repeated lookups.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read the instance stored on `app.state.settings` (see api.deps),
# so tests can build apps with explicit Settings without touching the cache.
