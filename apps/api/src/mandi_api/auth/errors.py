"""Auth error taxonomy.

Every error carries a message that is safe to show to clients and a short
``code`` the HTTP layer maps to a status.
"""


class AuthError(Exception):
    """Base class for expected auth failures."""

    code = "auth_error"
    message = "Authentication failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(AuthError):
    """Client input is malformed."""

    code = "validation_error"
    message = "Invalid registration data"


class DuplicateEmailError(AuthError):
    code = "duplicate_email"
    message = "User with this email already exists"


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password. Same message for both."""

    code = "invalid_credentials"
    message = "Invalid email or password"


class InvalidTokenError(AuthError):
    code = "invalid_token"
    message = "Invalid or expired refresh token"


class UserNotFoundError(AuthError):
    code = "user_not_found"
    message = "User not found"


class UnknownServerError(AuthError):
    """Catch-all. Details are logged, never returned."""

    code = "server_error"
    message = "Internal server error"
