"""Credential checks and token lifecycle for the single admin identity."""

import hmac
import logging

from memobbs.auth.tokens import (
    TokenClaims,
    TokenError,
    TokenExpiredError,
    TokenManager,
    TokenMissingError,
)
from memobbs.core.errors import ApiError, ErrorCode

logger = logging.getLogger(__name__)


def _same(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def token_error_to_api_error(error: TokenError) -> ApiError:
    if isinstance(error, TokenMissingError):
        return ApiError(401, "No token provided", ErrorCode.TOKEN_MISSING)
    if isinstance(error, TokenExpiredError):
        return ApiError(401, "Token expired", ErrorCode.TOKEN_EXPIRED)
    return ApiError(401, "Invalid token", ErrorCode.TOKEN_INVALID)


class AuthService:
    """Login, verification and refresh for the configured admin."""

    def __init__(self, admin_username: str, admin_password: str, tokens: TokenManager):
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.tokens = tokens

    def check_credentials(self, username: str, password: str) -> bool:
        # Both comparisons always run
        username_ok = _same(username, self.admin_username)
        password_ok = _same(password, self.admin_password)
        return username_ok and password_ok

    def login(self, username: str, password: str) -> str:
        if not self.check_credentials(username, password):
            logger.warning("Login failed: invalid credentials")
            raise ApiError(401, "Invalid credentials", ErrorCode.INVALID_CREDENTIALS)
        logger.info("Login successful")
        return self.tokens.issue(self.admin_username)

    def authenticate(self, token: str) -> TokenClaims:
        """Verify a bearer token and check it belongs to the admin."""
        try:
            claims = self.tokens.verify(token)
        except TokenError as e:
            raise token_error_to_api_error(e) from e

        if not _same(claims.username, self.admin_username):
            raise ApiError(403, "Forbidden", ErrorCode.FORBIDDEN)
        return claims

    def refresh(self, token: str) -> str:
        """Exchange a still-valid token for one with a full lifetime."""
        claims = self.authenticate(token)
        return self.tokens.issue(claims.username)

    def renewal_for(self, claims: TokenClaims):
        """A fresh token when the current one is close to expiry, else None."""
        if self.tokens.needs_renewal(claims):
            return self.tokens.issue(claims.username)
        return None
