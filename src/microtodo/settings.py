"""
microtodo.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for both services.
- Hide secrets from repr/logging (the JWT signing key).
- Reject signing keys that are too short, and the dev key in prod.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-only-microtodo-signing-key-change-me"
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """
    One settings model for every deployment:
    - `service` selects which app the entrypoint serves
    - the identity service and every task service must share `jwt_secret`
    """

    model_config = SettingsConfigDict(env_prefix="MICROTODO_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service: Literal["identity", "tasks"] = "identity"
    service_name: str = "microtodo"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8081

    # Auth
    jwt_alg: Literal["HS256", "HS384", "HS512"] = "HS256"
    jwt_secret: str = Field(default=DEV_JWT_SECRET, repr=False)
    jwt_ttl_seconds: int = Field(default=3600, ge=60, le=24 * 3600)
    jwt_leeway_seconds: int = Field(default=5, ge=0, le=30)

    # Cross-owner access answers 403 ("forbidden") or 404 ("not_found") everywhere.
    cross_owner_policy: Literal["forbidden", "not_found"] = "forbidden"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./microtodo.db"

    @model_validator(mode="after")
    def _check_jwt_secret(self) -> Settings:
        if len(self.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(f"jwt_secret must be at least {MIN_SECRET_LENGTH} characters")
        if self.env == "prod" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("jwt_secret must be set explicitly in prod")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The signing key flows from here into `auth.deps.jwt_config` and is injected
# explicitly into the issuer and validators; auth code never reads env vars.
