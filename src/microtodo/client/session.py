"""
microtodo.client.session

Client session state machine.

    UNAUTHENTICATED --login--> AUTHENTICATED
    AUTHENTICATED --logout | 401 | local expiry--> UNAUTHENTICATED

There is no refresh: once the token expires the user must log in again.
Logout is local only; the token stays cryptographically valid until `exp`.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable

from microtodo.auth.jwt import Clock, peek_expiry, utcnow
from microtodo.auth.models import IssuedToken, Principal
from microtodo.client.store import StoredSession, TokenStore
from microtodo.observability.logging import get_logger

log = get_logger(__name__)


class AuthState(enum.StrEnum):
    unauthenticated = "UNAUTHENTICATED"
    authenticated = "AUTHENTICATED"


# listener(new_state, cause) where cause is "login", "logout", "unauthorized" or "expired".
StateListener = Callable[[AuthState, str], None]


class SessionManager:
    def __init__(self, store: TokenStore, *, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock
        self._listeners: list[StateListener] = []
        # Guards read-then-clear so a stale 401 cannot drop a newer login.
        self._lock = threading.Lock()

    @property
    def state(self) -> AuthState:
        if self._current() is None:
            return AuthState.unauthenticated
        return AuthState.authenticated

    @property
    def principal(self) -> Principal | None:
        # For display only; servers derive identity from the token itself.
        session = self._current()
        if session is None:
            return None
        return Principal(user_id=session.user_id, username=session.username)

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def establish(self, issued: IssuedToken) -> StoredSession:
        session = StoredSession(
            token=issued.token,
            user_id=issued.user_id,
            username=issued.username,
            expires_at=peek_expiry(issued.token),
        )
        # Overwrites whatever an earlier login stored.
        with self._lock:
            self._store.save(session)
        log.info("client_session_established", user_id=issued.user_id)
        self._notify(AuthState.authenticated, "login")
        return session

    def bearer_token(self) -> str | None:
        session = self._current()
        return session.token if session is not None else None

    def logout(self) -> None:
        self._end("logout")

    def handle_unauthorized(self, rejected_token: str | None = None) -> None:
        """
        End the session after a server 401.

        With `rejected_token`, only a session still holding that token is ended;
        a login that completed while the request was in flight is kept.
        """
        self._end("unauthorized", only_token=rejected_token)

    def _current(self) -> StoredSession | None:
        # Read once so an expiry check and the returned token come from one value.
        session = self._store.load()
        if session is None:
            return None
        if session.expires_at is not None and session.expires_at <= self._clock():
            self._end("expired", only_token=session.token)
            return None
        return session

    def _end(self, cause: str, *, only_token: str | None = None) -> None:
        with self._lock:
            current = self._store.load()
            if current is not None and only_token is not None and current.token != only_token:
                # Replaced by a newer login in the meantime.
                return
            self._store.clear()
        if current is not None:
            log.info("client_session_ended", cause=cause)
            self._notify(AuthState.unauthenticated, cause)

    def _notify(self, state: AuthState, cause: str) -> None:
        for listener in list(self._listeners):
            listener(state, cause)
