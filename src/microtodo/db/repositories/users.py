"""
microtodo.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Serve as the issuer's credential store (`lookup`).
- Registration, profile and password persistence for the identity service.
"""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from microtodo.auth.models import Credential
from microtodo.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lookup(self, username: str) -> Credential | None:
        stmt = select(User.id, User.username, User.password_hash).where(User.username == username)
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return Credential(user_id=row.id, username=row.username, password_hash=row.password_hash)

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def exists_username(self, username: str) -> bool:
        stmt = select(exists().where(User.username == username))
        return bool((await self._session.execute(stmt)).scalar())

    async def exists_email(self, email: str) -> bool:
        stmt = select(exists().where(User.email == email))
        return bool((await self._session.execute(stmt)).scalar())

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def update_profile(
        self,
        user: User,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        await self._session.flush()
        return user

    async def set_password_hash(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        await self._session.flush()

    async def delete(self, user: User) -> None:
        await self._session.delete(user)
        await self._session.flush()
