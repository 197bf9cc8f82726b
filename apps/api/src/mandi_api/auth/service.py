"""Auth service: registration, login, token refresh, logout, language preference.

Expected failures (bad input, duplicate email, wrong credentials, bad tokens,
missing configuration) are caught here and returned as failed ``AuthResult``s.
Anything unexpected propagates to the HTTP layer.
"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from mandi_api.auth.errors import (
    AuthError,
    DuplicateEmailError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from mandi_api.auth.jwt import (
    create_access_token,
    create_token_pair,
    decode_refresh_token,
)
from mandi_api.auth.password import get_password_hash, verify_password
from mandi_api.config import ConfigurationError, Settings
from mandi_shared.schemas import (
    AuthResult,
    LoginRequest,
    RegistrationRequest,
    check_language_code,
    format_validation_error,
)

if TYPE_CHECKING:
    from mandi_api.db.repository import UserStore

logger = logging.getLogger(__name__)

SERVER_CONFIGURATION_ERROR = "Server configuration error"


def _failure(exc: AuthError | ConfigurationError) -> AuthResult:
    if isinstance(exc, AuthError):
        return AuthResult.failed(exc.message, exc.code)
    logger.error(f"Configuration error: {exc}")
    return AuthResult.failed(SERVER_CONFIGURATION_ERROR, "configuration_error")


class AuthService:
    """Authentication operations over an injected user store."""

    def __init__(self, store: "UserStore", settings: Settings):
        self.store = store
        self.settings = settings

    async def register(self, data: RegistrationRequest | dict[str, Any]) -> AuthResult:
        """Create a vendor or buyer account and issue a token pair."""
        try:
            request = self._validate_registration(data)

            if await self.store.find_by_email(request.email) is not None:
                raise DuplicateEmailError()

            # Fail closed before anything is written
            self.settings.signing_secrets()

            user = await self.store.create(
                email=request.email,
                password_hash=get_password_hash(
                    request.password, rounds=self.settings.bcrypt_rounds
                ),
                name=request.name,
                user_type=request.user_type.value,
                preferred_language=request.preferred_language,
                phone_number=request.phone_number,
            )
            tokens = create_token_pair(str(user.id), user.email, self.settings)
        except (AuthError, ConfigurationError) as e:
            return _failure(e)

        logger.info(f"Registered {user.user_type} {user.email} ({user.id})")
        return AuthResult(
            success=True,
            user=user.to_profile(),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
        )

    async def login(self, credentials: LoginRequest | dict[str, Any]) -> AuthResult:
        """Verify email and password, then issue a fresh token pair."""
        try:
            if isinstance(credentials, dict):
                try:
                    credentials = LoginRequest.model_validate(credentials)
                except PydanticValidationError as e:
                    raise InvalidCredentialsError() from e

            if not credentials.email or not credentials.password:
                raise InvalidCredentialsError()

            user = await self.store.find_by_email(credentials.email)
            # Same error whether the email is unknown or the password is wrong
            if user is None or not verify_password(
                credentials.password, user.password_hash
            ):
                logger.warning(f"Failed login for {credentials.email}")
                raise InvalidCredentialsError()

            tokens = create_token_pair(str(user.id), user.email, self.settings)
        except (AuthError, ConfigurationError) as e:
            return _failure(e)

        logger.info(f"Login: {user.email} ({user.id})")
        return AuthResult(
            success=True,
            user=user.to_profile(),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
        )

    async def refresh_token(self, token: str) -> AuthResult:
        """Mint a new access token from a refresh token. The refresh token is not rotated."""
        try:
            token_data = decode_refresh_token(token, self.settings)

            user = await self.store.find_by_id(token_data.sub)
            if user is None:
                raise UserNotFoundError()

            access_token = create_access_token(str(user.id), user.email, self.settings)
        except (AuthError, ConfigurationError) as e:
            if isinstance(e, AuthError):
                logger.warning(f"Token refresh rejected: {e.message}")
            return _failure(e)

        return AuthResult(
            success=True,
            user=user.to_profile(),
            access_token=access_token,
            expires_in=self.settings.access_token_expire_minutes * 60,
        )

    async def logout(self, user_id: str) -> AuthResult:
        """Record a logout.

        Tokens are stateless: an access token stays valid until it expires,
        the client is expected to discard it.
        """
        logger.info(f"User {user_id} logged out")
        return AuthResult(success=True, message="Logged out successfully")

    async def set_language_preference(self, user_id: str, language: str) -> AuthResult:
        """Change a user's preferred language."""
        try:
            try:
                check_language_code(language)
            except ValueError as e:
                raise ValidationError(str(e)) from e

            user = await self.store.update_language(user_id, language)
            if user is None:
                raise UserNotFoundError()
        except AuthError as e:
            return _failure(e)

        logger.info(f"User {user_id} switched language to {language}")
        return AuthResult(
            success=True,
            user=user.to_profile(),
            message="Language preference updated successfully",
        )

    @staticmethod
    def _validate_registration(
        data: RegistrationRequest | dict[str, Any],
    ) -> RegistrationRequest:
        if isinstance(data, RegistrationRequest):
            return data
        try:
            return RegistrationRequest.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid registration data: {format_validation_error(e)}"
            ) from e
