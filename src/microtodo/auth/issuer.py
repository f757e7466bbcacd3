"""
microtodo.auth.issuer

Token issuer for the identity service.

Responsibilities:
- Authenticate a username/password pair against the credential store.
- Mint a signed token for the authenticated user.

Security notes:
- Unknown user and wrong password raise the same `InvalidCredentials` and both
  run one bcrypt check, so neither the message nor the timing reveals whether
  the username exists.
- Nothing is persisted; the returned token is the whole session.
"""

from __future__ import annotations

from microtodo.auth.errors import InputValidationError, InvalidCredentials
from microtodo.auth.jwt import Clock, JwtConfig, issue_token, utcnow
from microtodo.auth.models import CredentialStore, IssuedToken
from microtodo.auth.passwords import DUMMY_HASH, verify_password
from microtodo.observability.logging import get_logger

log = get_logger(__name__)


class TokenIssuer:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        cfg: JwtConfig,
        clock: Clock = utcnow,
    ) -> None:
        self._credentials = credentials
        self._cfg = cfg
        self._clock = clock

    async def authenticate(self, username: str, password: str) -> IssuedToken:
        if not username or not username.strip():
            raise InputValidationError("Username is required")
        if not password:
            raise InputValidationError("Password is required")

        credential = await self._credentials.lookup(username)
        if credential is None:
            # Equalize timing before failing; do not return early.
            verify_password(password, DUMMY_HASH)
            log.info("login_failed")
            raise InvalidCredentials()
        if not verify_password(password, credential.password_hash):
            log.info("login_failed")
            raise InvalidCredentials()

        token = issue_token(
            cfg=self._cfg,
            user_id=credential.user_id,
            username=credential.username,
            now=self._clock(),
        )
        log.info("login_succeeded", user_id=credential.user_id)
        return IssuedToken(token=token, user_id=credential.user_id, username=credential.username)


# --- Module Notes -----------------------------------------------------------
# The credential store is injected; in the identity service it is `UserRepo`.
