"""JWT token creation and validation.

Provides access tokens (short-lived) and refresh tokens (long-lived).
The two kinds are signed with different secrets and carry a ``type`` claim,
so one can never be accepted in place of the other.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel

from mandi_api.auth.errors import InvalidTokenError
from mandi_api.config import Settings

ACCESS = "access"
REFRESH = "refresh"


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # User ID
    email: str
    type: str  # "access" or "refresh"
    exp: datetime
    iat: datetime


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    expires_in: int  # Seconds until access token expires


def _encode(
    user_id: str,
    email: str,
    token_type: str,
    secret: str,
    algorithm: str,
    expires_delta: timedelta,
) -> str:
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "type": token_type,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(
    user_id: str,
    email: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a short-lived access token.

    Args:
        user_id: The user's id.
        email: The user's email, bound into the token.
        settings: Supplies the signing secret, algorithm and default lifetime.
        expires_delta: Optional custom expiration time.

    Returns:
        Encoded JWT access token.

    Raises:
        ConfigurationError: If signing secrets are missing in production.
    """
    access_secret, _ = settings.signing_secrets()
    return _encode(
        user_id,
        email,
        ACCESS,
        access_secret,
        settings.jwt_algorithm,
        expires_delta or settings.access_token_ttl,
    )


def create_refresh_token(
    user_id: str,
    email: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a long-lived refresh token, signed with the refresh secret."""
    _, refresh_secret = settings.signing_secrets()
    return _encode(
        user_id,
        email,
        REFRESH,
        refresh_secret,
        settings.jwt_algorithm,
        expires_delta or settings.refresh_token_ttl,
    )


def create_token_pair(user_id: str, email: str, settings: Settings) -> TokenPair:
    """Create both access and refresh tokens."""
    return TokenPair(
        access_token=create_access_token(user_id, email, settings),
        refresh_token=create_refresh_token(user_id, email, settings),
        expires_in=settings.access_token_expire_minutes * 60,
    )


def _decode(token: str, secret: str, algorithm: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            type=payload["type"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError() from e


def decode_access_token(token: str, settings: Settings) -> TokenPayload:
    """Decode and validate an access token.

    Raises:
        InvalidTokenError: If the token is malformed, expired, signed with
            another secret, or is not an access token.
    """
    access_secret, _ = settings.signing_secrets()
    token_data = _decode(token, access_secret, settings.jwt_algorithm)
    if token_data.type != ACCESS:
        raise InvalidTokenError("Invalid token type")
    return token_data


def decode_refresh_token(token: str, settings: Settings) -> TokenPayload:
    """Decode and validate a refresh token.

    Raises:
        InvalidTokenError: "Invalid or expired refresh token" for bad signatures
            or expiry, "Invalid refresh token" when the type claim is wrong.
    """
    _, refresh_secret = settings.signing_secrets()
    token_data = _decode(token, refresh_secret, settings.jwt_algorithm)
    if token_data.type != REFRESH:
        raise InvalidTokenError("Invalid refresh token")
    return token_data
