"""FastAPI dependencies for authentication.

Provides the settings, user store and auth service for a request, and
``get_current_user`` which verifies the Bearer access token on protected routes.
"""

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from mandi_api.auth.errors import InvalidTokenError
from mandi_api.auth.jwt import decode_access_token
from mandi_api.auth.service import AuthService
from mandi_api.config import Settings
from mandi_api.db.database import get_db
from mandi_api.db.repository import SqlAlchemyUserStore, UserStore

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Identity decoded from a verified access token."""

    user_id: str
    email: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(db: AsyncSession = Depends(get_db)) -> UserStore:
    return SqlAlchemyUserStore(db)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(store, settings)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """FastAPI dependency that verifies the access token.

    No database lookup: the decoded ``{user_id, email}`` is trusted until the
    token expires.

    Raises:
        HTTPException: 401 if no token was sent, 403 if it is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        token_data = decode_access_token(credentials.credentials, settings)
    except InvalidTokenError as e:
        logger.debug(f"Rejected access token: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        ) from e

    return CurrentUser(user_id=token_data.sub, email=token_data.email)
