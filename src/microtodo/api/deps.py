"""
microtodo.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Build request-scoped services (issuer, accounts, tasks) on top of the session.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from microtodo.auth.deps import get_enforcer
from microtodo.auth.issuer import TokenIssuer
from microtodo.auth.ownership import OwnershipEnforcer
from microtodo.db.repositories.tasks import TaskRepo
from microtodo.db.repositories.users import UserRepo
from microtodo.services.accounts import AccountService
from microtodo.services.tasks import OwnedTaskService
from microtodo.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was built with, not a fresh env read.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`api.app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Routers commit explicitly after a successful write.
    async with session_factory() as session:
        yield session


def issuer_dep(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> TokenIssuer:
    return TokenIssuer(credentials=UserRepo(session), cfg=request.app.state.jwt_config)


def accounts_dep(session: AsyncSession = Depends(db_session)) -> AccountService:
    return AccountService(repo=UserRepo(session))


def tasks_dep(
    session: AsyncSession = Depends(db_session),
    enforcer: OwnershipEnforcer = Depends(get_enforcer),
) -> OwnedTaskService:
    return OwnedTaskService(repo=TaskRepo(session), enforcer=enforcer)
