"""
microtodo.api.routers.auth

Public login endpoint of the identity service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from microtodo.api.deps import issuer_dep
from microtodo.api.schemas import LoginRequest, LoginResponse
from microtodo.auth.issuer import TokenIssuer

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    issuer: TokenIssuer = Depends(issuer_dep),
) -> LoginResponse:
    issued = await issuer.authenticate(body.username, body.password)
    return LoginResponse(token=issued.token, user_id=issued.user_id, username=issued.username)
