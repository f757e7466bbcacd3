"""
microtodo.auth

Authentication/authorization package.

Responsibilities:
- Token issuing (identity service) and validation (every service).
- Ownership enforcement for per-user resources.
- FastAPI auth dependencies (Principal injection).
"""

from microtodo.auth.errors import (
    AuthError,
    Expired,
    Forbidden,
    InvalidCredentials,
    InvalidSignature,
    MalformedToken,
    MissingToken,
)
from microtodo.auth.jwt import JwtConfig, TokenValidator, issue_token
from microtodo.auth.models import IssuedToken, Principal

__all__ = [
    "AuthError",
    "Expired",
    "Forbidden",
    "InvalidCredentials",
    "InvalidSignature",
    "IssuedToken",
    "JwtConfig",
    "MalformedToken",
    "MissingToken",
    "Principal",
    "TokenValidator",
    "issue_token",
]


# --- Module Notes -----------------------------------------------------------
# `auth.errors`, `auth.models` and `auth.jwt` avoid FastAPI imports so the
# client package and other services can reuse them.
