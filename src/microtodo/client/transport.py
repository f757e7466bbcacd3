"""
microtodo.client.transport

httpx auth middleware for the client session.

Responsibilities:
- Attach `Authorization: Bearer <token>` to protected requests.
- Leave public endpoints (login, registration, availability checks) untouched.
- Move the session to unauthenticated when a protected request gets a 401.
"""

from __future__ import annotations

from collections.abc import Generator, Iterable

import httpx

from microtodo.client.session import SessionManager

PUBLIC_ENDPOINTS: frozenset[tuple[str, str]] = frozenset(
    {
        ("POST", "/api/auth/login"),
        ("POST", "/api/users"),
        ("GET", "/api/users/check-username"),
        ("GET", "/api/users/check-email"),
    }
)


class BearerAuth(httpx.Auth):
    """
    Composable with any `httpx.Client`/`httpx.AsyncClient` via `auth=`.
    """

    def __init__(
        self,
        session: SessionManager,
        *,
        public_endpoints: Iterable[tuple[str, str]] = PUBLIC_ENDPOINTS,
        base_path: str = "",
    ) -> None:
        self._session = session
        # Path prefix of the client's base URL, e.g. "/identity" behind a gateway.
        self._base_path = base_path.rstrip("/")
        self._public = frozenset((m.upper(), p.rstrip("/")) for m, p in public_endpoints)

    def is_public(self, request: httpx.Request) -> bool:
        path = request.url.path.rstrip("/")
        if self._base_path and path.startswith(self._base_path + "/"):
            path = path[len(self._base_path) :]
        return (request.method.upper(), path) in self._public

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.is_public(request):
            yield request
            return

        token = self._session.bearer_token()
        if token is not None:
            request.headers["Authorization"] = f"Bearer {token}"
        # Without a token the request still goes out; the server answers 401 MissingToken.
        response = yield request

        # A bare request's 401 says nothing about a session established meanwhile.
        if response.status_code == 401 and token is not None:
            self._session.handle_unauthorized(token)
