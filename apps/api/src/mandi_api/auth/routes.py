"""Authentication API routes.

Provides register, login, token refresh, logout and language preference
endpoints under ``/api/auth``. Every response body is an ``AuthResult``.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from mandi_api.auth.dependencies import (
    CurrentUser,
    get_auth_service,
    get_current_user,
)
from mandi_api.auth.service import AuthService
from mandi_shared.schemas import (
    MIN_LANGUAGE_CODE_LENGTH,
    AuthResult,
    LanguageUpdateRequest,
    LoginRequest,
    RefreshRequest,
)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Status for each failure kind unless a route overrides it
_FAILURE_STATUS = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "duplicate_email": status.HTTP_400_BAD_REQUEST,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "user_not_found": status.HTTP_401_UNAUTHORIZED,
    "configuration_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _respond(
    result: AuthResult,
    success_status: int = status.HTTP_200_OK,
    overrides: dict[str, int] | None = None,
) -> JSONResponse:
    """Serialize an AuthResult with the status matching its outcome."""
    if result.success:
        status_code = success_status
    else:
        statuses = {**_FAILURE_STATUS, **(overrides or {})}
        status_code = statuses.get(
            result.error_code or "", status.HTTP_400_BAD_REQUEST
        )
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


# =============================================================================
# Routes
# =============================================================================


@router.post(
    "/register",
    response_model=AuthResult,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": AuthResult}},
)
async def register(
    payload: dict[str, Any] = Body(...),
    auth: AuthService = Depends(get_auth_service),
):
    """Create a vendor or buyer account.

    - Validates the registration fields
    - Rejects duplicate emails
    - Stores a bcrypt hash of the password
    - Returns the profile with an access and a refresh token
    """
    result = await auth.register(payload)
    return _respond(result, success_status=status.HTTP_201_CREATED)


@router.post(
    "/login", response_model=AuthResult, responses={401: {"model": AuthResult}}
)
async def login(
    request: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Authenticate user and return tokens."""
    if not request.email or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    result = await auth.login(request)
    return _respond(result)


@router.post(
    "/refresh", response_model=AuthResult, responses={401: {"model": AuthResult}}
)
async def refresh_token(
    request: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Exchange a refresh token for a new access token.

    The refresh token itself is not rotated.
    """
    if not request.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Refresh token is required",
        )

    result = await auth.refresh_token(request.refresh_token)
    return _respond(result)


@router.post("/logout", response_model=AuthResult)
async def logout(
    user: CurrentUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    """Log out. The client discards its tokens; nothing is revoked server-side."""
    result = await auth.logout(user.user_id)
    return _respond(result)


@router.put("/language", response_model=AuthResult)
async def update_language(
    request: LanguageUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    """Update the authenticated user's preferred language."""
    if not request.language or len(request.language) < MIN_LANGUAGE_CODE_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid language code is required",
        )

    result = await auth.set_language_preference(user.user_id, request.language)
    return _respond(result, overrides={"user_not_found": status.HTTP_404_NOT_FOUND})
