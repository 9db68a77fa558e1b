"""API router for the auth module."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from memobbs.auth.dependencies import AdminDep, AuthServiceDep, get_bearer_token
from memobbs.auth.schemas import LoginRequest, SessionInfo, TokenResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, auth_service: AuthServiceDep) -> TokenResponse:
    """Exchange the admin credentials for a bearer token."""
    token = auth_service.login(credentials.username, credentials.password)
    return TokenResponse(token=token)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    auth_service: AuthServiceDep,
    token: Annotated[Optional[str], Depends(get_bearer_token)],
) -> TokenResponse:
    """Issue a token with a full lifetime in exchange for a still-valid one."""
    return TokenResponse(token=auth_service.refresh(token))


@router.get("/verify", response_model=SessionInfo)
def verify(claims: AdminDep) -> SessionInfo:
    return SessionInfo(username=claims.username, expires_at=claims.expires_at)
