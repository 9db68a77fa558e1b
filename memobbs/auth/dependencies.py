"""FastAPI dependencies guarding admin-only routes."""

from typing import Annotated, Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from memobbs.auth.service import AuthService
from memobbs.auth.tokens import TokenClaims

RENEWAL_HEADER = "X-New-Token"

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_bearer_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Optional[str]:
    return credentials.credentials if credentials else None


def require_admin(
    response: Response,
    auth_service: AuthServiceDep,
    token: Annotated[Optional[str], Depends(get_bearer_token)],
) -> TokenClaims:
    """Authenticate the request; attach a renewed token when the current one is about to expire."""
    claims = auth_service.authenticate(token)

    renewed = auth_service.renewal_for(claims)
    if renewed:
        response.headers[RENEWAL_HEADER] = renewed
    return claims


AdminDep = Annotated[TokenClaims, Depends(require_admin)]
