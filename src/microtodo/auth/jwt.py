"""
microtodo.auth.jwt

JWT issuing and validation.

Responsibilities:
- Mint HMAC-signed tokens carrying `sub`, `userId`, `iat` and `exp`.
- Validate a raw `Authorization` header into a `Principal`, mapping every
  failure onto the auth error taxonomy.

Note:
- `TokenValidator` is the only validation implementation; every service builds
  one from its own `JwtConfig` (same key, same rules).
- Expiry is checked against an injected clock so validation stays a pure
  function of (token, key, clock).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import (
    InvalidAlgorithmError,
    InvalidSignatureError,
    InvalidTokenError,
    MissingRequiredClaimError,
)

from microtodo.auth.errors import (
    Expired,
    InvalidSignature,
    MalformedToken,
    MissingToken,
)
from microtodo.auth.models import Principal

Clock = Callable[[], datetime]

BEARER_PREFIX = "Bearer "
REQUIRED_CLAIMS = ("sub", "userId", "iat", "exp")

_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # The same values must be configured in the issuer and every validator.
    alg: str
    secret: str = field(repr=False)
    ttl_seconds: int = 3600
    leeway_seconds: int = 5


def issue_token(
    *,
    cfg: JwtConfig,
    user_id: int,
    username: str,
    now: datetime | None = None,
    ttl: timedelta | None = None,
) -> str:
    issued_at = now or utcnow()
    lifetime = ttl if ttl is not None else timedelta(seconds=cfg.ttl_seconds)
    payload: dict[str, Any] = {
        "sub": username,
        "userId": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def bearer_token(raw_header: str | None) -> str:
    """
    Extract the token from an `Authorization: Bearer <token>` header value.
    """
    if not raw_header or not raw_header.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = raw_header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise MissingToken()
    return token


def peek_expiry(token: str) -> datetime | None:
    """
    Read `exp` without verifying the signature.

    Only for client-side bookkeeping (local expiry detection); never use the
    result for an authorization decision.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except InvalidTokenError:
        return None
    exp = claims.get("exp")
    if not isinstance(exp, int) or isinstance(exp, bool):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        # Outside the platform's representable range.
        return None


class TokenValidator:
    """
    Stateless validator: no I/O, no mutable state, safe to share across requests.
    """

    def __init__(self, cfg: JwtConfig, *, clock: Clock = utcnow) -> None:
        self._cfg = cfg
        self._clock = clock

    def validate(self, raw_header: str | None) -> Principal:
        return self.decode(bearer_token(raw_header))

    def decode(self, token: str) -> Principal:
        segments = token.split(".")
        if len(segments) != 3 or not all(_SEGMENT.match(s) for s in segments):
            raise MalformedToken()

        try:
            # Expiry is checked below against the injected clock.
            claims = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (InvalidSignatureError, InvalidAlgorithmError) as e:
            # Wrong key, foreign algorithm, or `alg: none` all fail closed.
            raise InvalidSignature() from e
        except MissingRequiredClaimError as e:
            raise MalformedToken(f"Token is missing claim: {e.claim}") from e
        except InvalidTokenError as e:
            # DecodeError and any other structural failure.
            raise MalformedToken() from e

        return self._principal(claims)

    def _principal(self, claims: dict[str, Any]) -> Principal:
        exp = claims["exp"]
        if not _is_int(exp) or not _is_int(claims["iat"]):
            raise MalformedToken("Token timestamps must be integers")
        now = int(self._clock().timestamp())
        if exp <= now - self._cfg.leeway_seconds:
            raise Expired()

        user_id = claims["userId"]
        username = claims["sub"]
        if not _is_int(user_id) or not isinstance(username, str) or not username:
            raise MalformedToken("Token identity claims are invalid")
        return Principal(user_id=user_id, username=username)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- Module Notes -----------------------------------------------------------
# Signature comparison is done by PyJWT's HMAC algorithm (`hmac.compare_digest`).
# Token issuing is used by `auth.issuer`; validation by `auth.deps` in every app.
