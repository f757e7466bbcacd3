"""
microtodo.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
- Define the issuer's output and the credential-store boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, built only from a validated token.
    """

    user_id: int
    username: str


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str = field(repr=False)
    user_id: int
    username: str


@dataclass(frozen=True, slots=True)
class Credential:
    user_id: int
    username: str
    password_hash: str = field(repr=False)


class CredentialStore(Protocol):
    async def lookup(self, username: str) -> Credential | None: ...


class OwnedResource(Protocol):
    @property
    def owner_id(self) -> int: ...


# --- Module Notes -----------------------------------------------------------
# Keep these models minimal; they cross the API, service and client boundaries.
