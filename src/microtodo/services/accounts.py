"""
microtodo.services.accounts

Account management for the identity service.

Responsibilities:
- Register users (unique username/email, bcrypt-hashed password).
- Self-service profile reads/updates, password change and account deletion,
  always keyed by the authenticated principal.
"""

from __future__ import annotations

from microtodo.auth.errors import Conflict, Forbidden, ResourceNotFound
from microtodo.auth.models import Principal
from microtodo.auth.passwords import hash_password, verify_password
from microtodo.db.models import User
from microtodo.db.repositories.users import UserRepo
from microtodo.observability.logging import get_logger

log = get_logger(__name__)


class AccountService:
    def __init__(self, *, repo: UserRepo) -> None:
        self._repo = repo

    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        if await self._repo.exists_username(username):
            raise Conflict("Username already exists")
        if await self._repo.exists_email(email):
            raise Conflict("Email already exists")
        user = await self._repo.create(
            username=username,
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        log.info("user_registered", new_user_id=user.id)
        return user

    async def username_available(self, username: str) -> bool:
        return not await self._repo.exists_username(username)

    async def email_available(self, email: str) -> bool:
        return not await self._repo.exists_email(email)

    async def me(self, principal: Principal) -> User:
        # A valid token can outlive its account; treat that as not found.
        user = await self._repo.get(principal.user_id)
        if user is None:
            raise ResourceNotFound("User not found")
        return user

    async def get(self, principal: Principal, user_id: int) -> User:
        if user_id != principal.user_id:
            raise Forbidden()
        return await self.me(principal)

    async def update_profile(
        self,
        principal: Principal,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        user = await self.me(principal)
        return await self._repo.update_profile(user, first_name=first_name, last_name=last_name)

    async def change_password(
        self, principal: Principal, *, old_password: str, new_password: str
    ) -> None:
        user = await self.me(principal)
        if not verify_password(old_password, user.password_hash):
            raise Forbidden("Old password incorrect")
        await self._repo.set_password_hash(user, hash_password(new_password))
        log.info("password_changed")

    async def delete(self, principal: Principal) -> None:
        user = await self.me(principal)
        await self._repo.delete(user)
        log.info("user_deleted")


# --- Module Notes -----------------------------------------------------------
# Tokens already issued stay valid until `exp` after a password change or
# account deletion; there is no revocation list.
