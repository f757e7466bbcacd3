"""
tests.conftest

Shared fixtures: both services running in-process against SQLite files under
`tmp_path`, plus helpers to mint tokens with the shared test key.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from microtodo.api.app import create_identity_app, create_task_app
from microtodo.auth.jwt import JwtConfig, issue_token
from microtodo.settings import Settings

# 64 characters: long enough for every HS* algorithm.
TEST_SECRET = "test-signing-key-0123456789abcdef-0123456789abcdef-0123456789ab"
OTHER_SECRET = "a-different-key-that-no-service-trusts-0123456789abcdef-01234567"


@pytest.fixture
def jwt_cfg() -> JwtConfig:
    return JwtConfig(alg="HS256", secret=TEST_SECRET, ttl_seconds=3600, leeway_seconds=5)


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., Settings]:
    def _make(service: str, **overrides) -> Settings:
        values = {
            "env": "test",
            "service": service,
            "jwt_secret": TEST_SECRET,
            "log_level": "WARNING",
            "database_url": f"sqlite+aiosqlite:///{tmp_path / f'{service}.db'}",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def mint(jwt_cfg: JwtConfig) -> Callable[..., str]:
    def _mint(
        user_id: int,
        username: str,
        *,
        now: datetime | None = None,
        ttl: timedelta | None = None,
        secret: str | None = None,
    ) -> str:
        cfg = jwt_cfg if secret is None else JwtConfig(alg=jwt_cfg.alg, secret=secret)
        return issue_token(cfg=cfg, user_id=user_id, username=username, now=now, ttl=ttl)

    return _mint


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _running(app: FastAPI) -> AsyncIterator[FastAPI]:
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def identity_app(make_settings) -> AsyncIterator[FastAPI]:
    async for app in _running(create_identity_app(settings=make_settings("identity"))):
        yield app


@pytest_asyncio.fixture
async def task_app(make_settings) -> AsyncIterator[FastAPI]:
    async for app in _running(create_task_app(settings=make_settings("tasks"))):
        yield app


@pytest_asyncio.fixture
async def identity_http(identity_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=identity_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://identity") as client:
        yield client


@pytest_asyncio.fixture
async def task_http(task_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=task_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://tasks") as client:
        yield client


async def register_and_login(
    http: httpx.AsyncClient, username: str, password: str = "correct-horse-battery"
) -> dict:
    r = await http.post(
        "/api/users",
        json={"username": username, "email": f"{username}@example.com", "password": password},
    )
    assert r.status_code == 201, r.text
    r = await http.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()
