"""
family_access.settings

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
    - Strict env-driven configuration
    - Defaults safe for local dev (fail-closed: no origins allowed until configured)
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="FAMILY_ACCESS_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "family-access-gate"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    # Only enable behind a proxy that overwrites X-Forwarded-For.
    trust_forwarded_for: bool = False

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./family_access.db"

    # Allowlist
    allowlist_scope: str = "SYSTEM_CONFIG"
    # One-time trusted initialization; ignored once an allowlist has been stored.
    bootstrap_allowed_origins: list[str] = Field(default_factory=list)

    # Identity provider
    identity_backend: Literal["http", "jwt"] = "jwt"
    identity_userinfo_url: str = "http://localhost:9000/oauth2/userInfo"
    identity_timeout_seconds: float = Field(default=5.0, gt=0)

    # Local JWT verification (identity_backend="jwt") and dev token minting
    jwt_alg: str = "HS256"
    jwt_issuer: str = "family-access-gate"
    jwt_audience: str = "family-display"
    jwt_secret: str = Field(default="dev-only-signing-secret-change-me-0000", repr=False)

    # Audit trail
    audit_sinks: list[Literal["log", "db"]] = Field(default_factory=lambda: ["log", "db"])
    audit_queue_size: int = Field(default=1000, ge=1)
    audit_write_timeout_seconds: float = Field(default=2.0, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# List-valued settings are read from env as JSON, e.g.
# FAMILY_ACCESS_BOOTSTRAP_ALLOWED_ORIGINS='["203.0.113.5"]'.
