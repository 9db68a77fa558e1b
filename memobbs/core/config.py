# memobbs/core/config.py
"""Application settings loaded from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from dotenv import load_dotenv

REQUIRED_ENV_VARS = ("ADMIN_USERNAME", "ADMIN_PASSWORD", "JWT_SECRET")

VALID_ENVIRONMENTS = ("development", "production", "test")


class ConfigurationError(RuntimeError):
    """Raised when the application cannot start with the given configuration."""


@dataclass
class Settings:
    """Runtime configuration for the memo server."""

    admin_username: str
    admin_password: str
    jwt_secret: str

    database_url: str = "sqlite:///./memobbs.db"
    upload_dir: str = "./uploads"
    server_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"

    token_ttl_hours: int = 24
    token_renew_threshold_minutes: int = 60

    application_id: str = "memobbs"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        if self.environment not in VALID_ENVIRONMENTS:
            raise ConfigurationError(
                f"Unsupported APP_ENV: {self.environment}. Expected one of {VALID_ENVIRONMENTS}"
            )
        if self.token_ttl_hours <= 0:
            raise ConfigurationError("TOKEN_TTL_HOURS must be positive")
        if self.token_renew_threshold_minutes < 0:
            raise ConfigurationError("TOKEN_RENEW_THRESHOLD_MINUTES cannot be negative")
        if self.token_renew_threshold_minutes >= self.token_ttl_hours * 60:
            raise ConfigurationError("Token renewal threshold must be shorter than the token lifetime")
        if self.server_url:
            self.server_url = self.server_url.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        When ``environ`` is omitted the process environment is used, after
        loading a ``.env`` file from the working directory if one exists.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        try:
            port = int(environ.get("PORT", "3000"))
            ttl = int(environ.get("TOKEN_TTL_HOURS", "24"))
            threshold = int(environ.get("TOKEN_RENEW_THRESHOLD_MINUTES", "60"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        origins = [o.strip() for o in environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            admin_username=environ["ADMIN_USERNAME"],
            admin_password=environ["ADMIN_PASSWORD"],
            jwt_secret=environ["JWT_SECRET"],
            database_url=environ.get("DATABASE_URL", "sqlite:///./memobbs.db"),
            upload_dir=environ.get("UPLOAD_DIR", "./uploads"),
            server_url=environ.get("SERVER_URL") or None,
            host=environ.get("HOST", "0.0.0.0"),
            port=port,
            environment=environ.get("APP_ENV", "development"),
            token_ttl_hours=ttl,
            token_renew_threshold_minutes=threshold,
            application_id=environ.get("APPLICATION_ID", "memobbs"),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            cors_origins=origins or ["*"],
        )

    def describe(self) -> Dict[str, str]:
        """Loggable summary with secrets masked."""
        return {
            "admin_username": self.admin_username,
            "jwt_secret": "[SET]" if self.jwt_secret else "[NOT SET]",
            "database_url": self.database_url,
            "upload_dir": self.upload_dir,
            "server_url": self.server_url or "[auto]",
            "environment": self.environment,
        }
