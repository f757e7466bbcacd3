"""
microtodo.api.schemas

Request/response models.

Wire names are camelCase (`userId`, `firstName`); Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from microtodo.db.models import TaskStatus

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginRequest(ApiModel):
    # Emptiness is checked by the issuer so it reports one consistent 400.
    username: str = Field(max_length=50)
    password: str = Field(max_length=72)


class LoginResponse(ApiModel):
    token: str
    user_id: int
    username: str


class UserRegisterRequest(ApiModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=254, pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=72)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)


class UpdateProfileRequest(ApiModel):
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)


class ChangePasswordRequest(ApiModel):
    old_password: str = Field(min_length=1, max_length=72)
    new_password: str = Field(min_length=8, max_length=72)


class UserProfileResponse(ApiModel):
    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None


class AvailabilityResponse(ApiModel):
    available: bool


class TaskCreateRequest(ApiModel):
    title: str = Field(min_length=3, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None

    # Accepted so older clients don't fail validation; the owner always comes
    # from the token (see `auth.ownership.OwnershipEnforcer.claim`).
    owner_id: int | None = None
    user_id: int | None = None


class TaskUpdateRequest(ApiModel):
    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None
    owner_id: int | None = None
    user_id: int | None = None

    @field_validator("title", "status")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TaskResponse(ApiModel):
    id: int
    title: str
    description: str | None
    status: TaskStatus
    owner_id: int
    created_at: datetime
    updated_at: datetime
