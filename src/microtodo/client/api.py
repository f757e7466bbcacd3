"""
microtodo.client.api

Async API client for the identity and task services.

Responsibilities:
- Log in and hand the issued token to the `SessionManager`.
- Call protected endpoints through `BearerAuth`.
- Raise the matching `microtodo.auth.errors` type for error responses.
"""

from __future__ import annotations

from typing import Any

import httpx

from microtodo.auth.errors import error_for_reason
from microtodo.auth.models import IssuedToken
from microtodo.client.session import SessionManager
from microtodo.client.transport import BearerAuth


class MicroTodoClient:
    def __init__(
        self,
        *,
        session: SessionManager,
        identity_url: str,
        tasks_url: str,
        timeout: float = 10.0,
        identity_transport: httpx.AsyncBaseTransport | None = None,
        tasks_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._identity = httpx.AsyncClient(
            base_url=identity_url,
            auth=BearerAuth(session, base_path=httpx.URL(identity_url).path),
            timeout=timeout,
            transport=identity_transport,
        )
        self._tasks = httpx.AsyncClient(
            base_url=tasks_url,
            auth=BearerAuth(session, base_path=httpx.URL(tasks_url).path),
            timeout=timeout,
            transport=tasks_transport,
        )

    @property
    def session(self) -> SessionManager:
        return self._session

    async def __aenter__(self) -> MicroTodoClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._identity.aclose()
        await self._tasks.aclose()

    # --- identity service ---------------------------------------------------

    async def login(self, username: str, password: str) -> IssuedToken:
        r = await self._identity.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        body = _json_or_raise(r)
        issued = IssuedToken(token=body["token"], user_id=body["userId"], username=body["username"])
        self._session.establish(issued)
        return issued

    def logout(self) -> None:
        # Local only; there is nothing to revoke server-side.
        self._session.logout()

    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> dict[str, Any]:
        r = await self._identity.post(
            "/api/users",
            json={
                "username": username,
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
            },
        )
        return _json_or_raise(r)

    async def username_available(self, username: str) -> bool:
        r = await self._identity.get("/api/users/check-username", params={"username": username})
        return bool(_json_or_raise(r)["available"])

    async def me(self) -> dict[str, Any]:
        return _json_or_raise(await self._identity.get("/api/users/me"))

    # --- task service -------------------------------------------------------

    async def list_tasks(self) -> list[dict[str, Any]]:
        return _json_or_raise(await self._tasks.get("/api/tasks"))

    async def get_task(self, task_id: int) -> dict[str, Any]:
        return _json_or_raise(await self._tasks.get(f"/api/tasks/{task_id}"))

    async def create_task(
        self, *, title: str, description: str | None = None, status: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": title, "description": description}
        if status is not None:
            payload["status"] = status
        return _json_or_raise(await self._tasks.post("/api/tasks", json=payload))

    async def update_task(self, task_id: int, **changes: Any) -> dict[str, Any]:
        return _json_or_raise(await self._tasks.put(f"/api/tasks/{task_id}", json=changes))

    async def delete_task(self, task_id: int) -> None:
        _raise_for_error(await self._tasks.delete(f"/api/tasks/{task_id}"))


def _raise_for_error(r: httpx.Response) -> None:
    if r.is_success:
        return
    try:
        body = r.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    cls = error_for_reason(body.get("reason"), status_code=r.status_code)
    raise cls(body.get("error"))


def _json_or_raise(r: httpx.Response) -> Any:
    _raise_for_error(r)
    return r.json()


# --- Module Notes -----------------------------------------------------------
# The client never retries a rejected request; recovery is a fresh `login`.
