"""
microtodo.api.routers.users

User endpoints of the identity service.

Responsibilities:
- Public: registration and username/email availability checks.
- Authenticated: the caller's own profile, password and account.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from microtodo.api.deps import accounts_dep, db_session
from microtodo.api.schemas import (
    AvailabilityResponse,
    ChangePasswordRequest,
    UpdateProfileRequest,
    UserProfileResponse,
    UserRegisterRequest,
)
from microtodo.auth.deps import get_principal
from microtodo.auth.models import Principal
from microtodo.services.accounts import AccountService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserProfileResponse, status_code=HTTP_201_CREATED)
async def register(
    body: UserRegisterRequest,
    accounts: AccountService = Depends(accounts_dep),
    session: AsyncSession = Depends(db_session),
) -> UserProfileResponse:
    user = await accounts.register(
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    await session.commit()
    return UserProfileResponse.model_validate(user)


@router.get("/check-username", response_model=AvailabilityResponse)
async def check_username(
    username: str = Query(min_length=1, max_length=50),
    accounts: AccountService = Depends(accounts_dep),
) -> AvailabilityResponse:
    return AvailabilityResponse(available=await accounts.username_available(username))


@router.get("/check-email", response_model=AvailabilityResponse)
async def check_email(
    email: str = Query(min_length=1, max_length=254),
    accounts: AccountService = Depends(accounts_dep),
) -> AvailabilityResponse:
    return AvailabilityResponse(available=await accounts.email_available(email))


@router.get("/me", response_model=UserProfileResponse)
async def me(
    principal: Principal = Depends(get_principal),
    accounts: AccountService = Depends(accounts_dep),
) -> UserProfileResponse:
    return UserProfileResponse.model_validate(await accounts.me(principal))


@router.put("/me", response_model=UserProfileResponse)
async def update_me(
    body: UpdateProfileRequest,
    principal: Principal = Depends(get_principal),
    accounts: AccountService = Depends(accounts_dep),
    session: AsyncSession = Depends(db_session),
) -> UserProfileResponse:
    user = await accounts.update_profile(
        principal, first_name=body.first_name, last_name=body.last_name
    )
    await session.commit()
    return UserProfileResponse.model_validate(user)


@router.patch("/me/password", status_code=HTTP_204_NO_CONTENT)
async def change_password(
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_principal),
    accounts: AccountService = Depends(accounts_dep),
    session: AsyncSession = Depends(db_session),
) -> Response:
    await accounts.change_password(
        principal, old_password=body.old_password, new_password=body.new_password
    )
    await session.commit()
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.delete("/me", status_code=HTTP_204_NO_CONTENT)
async def delete_me(
    principal: Principal = Depends(get_principal),
    accounts: AccountService = Depends(accounts_dep),
    session: AsyncSession = Depends(db_session),
) -> Response:
    await accounts.delete(principal)
    await session.commit()
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(
    user_id: int,
    principal: Principal = Depends(get_principal),
    accounts: AccountService = Depends(accounts_dep),
) -> UserProfileResponse:
    # Same-user only.
    return UserProfileResponse.model_validate(await accounts.get(principal, user_id))
