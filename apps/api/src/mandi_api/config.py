"""Application configuration.

Settings are read from the environment once at startup (``Settings.from_env``)
and passed explicitly to ``create_app``. Nothing else reads ``os.environ``.

In production the JWT signing secrets are mandatory: startup fails fast and
token issuance fails closed instead of falling back to development secrets.
"""

import os
from dataclasses import dataclass
from datetime import timedelta

PRODUCTION = "production"

# Only ever used outside production
DEV_JWT_SECRET = "dev-secret-key-not-for-production"
DEV_JWT_REFRESH_SECRET = "dev-refresh-secret-key-not-for-production"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _int_env(key: str, default: int) -> int:
    """Get an integer env var or raise a clear error."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid integer for environment variable: {key}\n"
            f"Got: {value!r}\n"
            f'Example: {key}="{default}"'
        ) from None


@dataclass
class Settings:
    """Runtime settings for the marketplace API."""

    environment: str = "development"
    jwt_secret: str | None = None
    jwt_refresh_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    bcrypt_rounds: int = 12
    database_url: str = "sqlite+aiosqlite:///./mandi.db"
    frontend_url: str = "http://localhost:3000"
    port: int = 3001

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables. Fails fast in production."""
        settings = cls(
            environment=os.getenv("APP_ENV", "development").lower(),
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_refresh_secret=os.getenv("JWT_REFRESH_SECRET") or None,
            access_token_expire_minutes=_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 15),
            refresh_token_expire_days=_int_env("REFRESH_TOKEN_EXPIRE_DAYS", 7),
            bcrypt_rounds=_int_env("BCRYPT_ROUNDS", 12),
            database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./mandi.db"),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
            port=_int_env("PORT", 3001),
        )
        settings.validate()
        return settings

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_expire_days)

    def validate(self) -> None:
        """Raise ConfigurationError if the settings cannot be used as-is."""
        missing = [
            name
            for name, value in (
                ("JWT_SECRET", self.jwt_secret),
                ("JWT_REFRESH_SECRET", self.jwt_refresh_secret),
            )
            if not value
        ]
        if missing and self.is_production:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}\n"
                "Signing secrets must be set explicitly in production."
            )

    def signing_secrets(self) -> tuple[str, str]:
        """Return the (access, refresh) signing secrets.

        Raises:
            ConfigurationError: If a secret is missing in production.
        """
        self.validate()
        return (
            self.jwt_secret or DEV_JWT_SECRET,
            self.jwt_refresh_secret or DEV_JWT_REFRESH_SECRET,
        )
