"""JWT bearer tokens for the admin identity."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4

import jwt

ALGORITHM = "HS256"


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenMissingError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


class TokenExpiredError(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    username: str
    issued_at: datetime
    expires_at: datetime

    def remaining(self, now: datetime) -> timedelta:
        return self.expires_at - now


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """Issues and verifies signed, expiring tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        renew_threshold: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.secret = secret
        self.ttl = ttl
        self.renew_threshold = renew_threshold
        self.clock = clock

    def issue(self, username: str) -> str:
        now = self.clock()
        payload = {
            "username": username,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: Optional[str]) -> TokenClaims:
        """Decode a token, distinguishing expiry from every other failure."""
        if not token:
            raise TokenMissingError("No token provided")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError("Invalid token") from e

        username = payload.get("username")
        if not isinstance(username, str) or not username:
            raise TokenInvalidError("Invalid token")

        return TokenClaims(
            username=username,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def needs_renewal(self, claims: TokenClaims) -> bool:
        return claims.remaining(self.clock()) < self.renew_threshold
