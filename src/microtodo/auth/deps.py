"""
microtodo.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Build the explicit `JwtConfig` from settings (the only place the key is read).
- Convert the `Authorization` header into a typed `Principal`.
- Expose the app's validator and ownership enforcer to routers.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request

from microtodo.auth.jwt import JwtConfig, TokenValidator
from microtodo.auth.models import Principal
from microtodo.auth.ownership import OwnershipEnforcer
from microtodo.settings import Settings


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        secret=settings.jwt_secret,
        ttl_seconds=settings.jwt_ttl_seconds,
        leeway_seconds=settings.jwt_leeway_seconds,
    )


def get_validator(request: Request) -> TokenValidator:
    # Created once per app in `api.app`; shared by all requests.
    return request.app.state.validator  # type: ignore[attr-defined]


def get_enforcer(request: Request) -> OwnershipEnforcer:
    return request.app.state.enforcer  # type: ignore[attr-defined]


async def get_principal(
    request: Request,
    validator: TokenValidator = Depends(get_validator),
) -> Principal:
    # Raises an AuthError subclass; `api.errors` turns it into a 401 body.
    principal = validator.validate(request.headers.get("Authorization"))

    # Downstream code reads identity from here, never from request fields.
    request.state.principal = principal
    structlog.contextvars.bind_contextvars(user_id=principal.user_id)
    return principal


# --- Module Notes -----------------------------------------------------------
# Every protected route depends on `get_principal`; public routes simply don't.
