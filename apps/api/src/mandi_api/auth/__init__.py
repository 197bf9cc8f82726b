"""Authentication module.

Provides JWT-based authentication, password hashing, the auth service and
its error taxonomy. Routes and FastAPI dependencies live in
``mandi_api.auth.routes`` and ``mandi_api.auth.dependencies``.
"""

from mandi_api.auth.errors import (
    AuthError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    UnknownServerError,
    UserNotFoundError,
    ValidationError,
)
from mandi_api.auth.jwt import (
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_access_token,
    decode_refresh_token,
)
from mandi_api.auth.password import get_password_hash, verify_password
from mandi_api.auth.service import AuthService

__all__ = [
    "AuthError",
    "AuthService",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UnknownServerError",
    "UserNotFoundError",
    "ValidationError",
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_access_token",
    "decode_refresh_token",
    "get_password_hash",
    "verify_password",
]
