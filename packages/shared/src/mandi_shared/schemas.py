"""Pydantic schemas shared by the marketplace API and its Python client.

JSON on the wire uses camelCase keys (``preferredLanguage``, ``userType``,
``accessToken``...). Python code uses the snake_case field names.
"""

import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

# =============================================================================
# Constants
# =============================================================================

MIN_PASSWORD_LENGTH: int = 8
MIN_NAME_LENGTH: int = 2
MIN_LANGUAGE_CODE_LENGTH: int = 2
PHONE_DIGITS: int = 10

_NON_DIGITS = re.compile(r"\D")


# =============================================================================
# Enums
# =============================================================================


class UserType(str, Enum):
    """Marketplace roles."""

    VENDOR = "VENDOR"  # Sells produce/goods
    BUYER = "BUYER"  # Purchases


class Language(BaseModel):
    """A language the marketplace UI and translations support."""

    code: str
    name: str
    native_name: str


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language(code="en", name="English", native_name="English"),
    Language(code="hi", name="Hindi", native_name="हिन्दी"),
    Language(code="bn", name="Bengali", native_name="বাংলা"),
    Language(code="te", name="Telugu", native_name="తెలుగు"),
    Language(code="mr", name="Marathi", native_name="मराठी"),
    Language(code="ta", name="Tamil", native_name="தமிழ்"),
    Language(code="gu", name="Gujarati", native_name="ગુજરાતી"),
    Language(code="kn", name="Kannada", native_name="ಕನ್ನಡ"),
    Language(code="ml", name="Malayalam", native_name="മലയാളം"),
    Language(code="pa", name="Punjabi", native_name="ਪੰਜਾਬੀ"),
    Language(code="or", name="Odia", native_name="ଓଡ଼ିଆ"),
)

SUPPORTED_LANGUAGE_CODES: frozenset[str] = frozenset(
    lang.code for lang in SUPPORTED_LANGUAGES
)

DEFAULT_LANGUAGE = "en"


def is_supported_language(code: str) -> bool:
    """Check whether a language code is one the marketplace supports."""
    return code in SUPPORTED_LANGUAGE_CODES


def check_language_code(code: str) -> str:
    """Validate a language code, raising ValueError with a client-facing message."""
    if len(code) < MIN_LANGUAGE_CODE_LENGTH:
        raise ValueError("Language code must be at least 2 characters")
    if not is_supported_language(code):
        raise ValueError(f"Unsupported language code: {code}")
    return code


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Requests
# =============================================================================


class RegistrationRequest(CamelModel):
    """Registration payload for a new vendor or buyer."""

    email: str
    password: str
    name: str
    preferred_language: str
    user_type: UserType
    phone_number: str | None = None

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        try:
            _, email = validate_email(value)
        except PydanticCustomError as e:
            raise ValueError("Invalid email format") from e
        # Display-name forms and surrounding whitespace are not bare addresses
        if email.lower() != value.lower():
            raise ValueError("Invalid email format")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password must be at least 8 characters")
        if len(value.strip()) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                "Password must contain at least 8 non-whitespace characters"
            )
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if len(value) < MIN_NAME_LENGTH:
            raise ValueError("Name must be at least 2 characters")
        if len(value.strip()) < MIN_NAME_LENGTH:
            raise ValueError("Name must contain at least 2 non-whitespace characters")
        return value

    @field_validator("preferred_language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        return check_language_code(value)

    @field_validator("user_type", mode="before")
    @classmethod
    def _check_user_type(cls, value: object) -> object:
        if isinstance(value, UserType):
            return value
        if not isinstance(value, str) or value not in {t.value for t in UserType}:
            raise ValueError("User type must be VENDOR or BUYER")
        return value

    @field_validator("phone_number")
    @classmethod
    def _check_phone(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        digits = _NON_DIGITS.sub("", value)
        if len(digits) != PHONE_DIGITS:
            raise ValueError("Phone number must contain exactly 10 digits")
        return digits


class LoginRequest(CamelModel):
    """Login payload. Fields are optional so the route can answer 400 itself."""

    email: str | None = None
    password: str | None = None


class RefreshRequest(CamelModel):
    """Token refresh payload."""

    refresh_token: str | None = None


class LanguageUpdateRequest(CamelModel):
    """Language preference update payload."""

    language: str | None = None


# =============================================================================
# Responses
# =============================================================================


class UserProfile(CamelModel):
    """User data safe to hand to clients (no password hash)."""

    id: str
    email: str
    name: str
    user_type: UserType
    preferred_language: str


class AuthResult(CamelModel):
    """Outcome of an auth operation: either a success or an error, never both."""

    success: bool
    user: UserProfile | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None  # Seconds until the access token expires
    message: str | None = None
    error: str | None = None
    # Machine-readable failure kind, used by the HTTP layer to pick a status
    error_code: str | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _check_outcome(self) -> "AuthResult":
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("A failed result must carry an error")
            if self.user or self.access_token or self.refresh_token:
                raise ValueError("A failed result cannot carry a user or tokens")
        return self

    @classmethod
    def failed(cls, error: str, code: str | None = None) -> "AuthResult":
        """Build a failure result."""
        return cls(success=False, error=error, error_code=code)


def format_validation_error(exc: ValidationError) -> str:
    """Join pydantic error messages into one client-facing sentence."""
    return format_error_list(exc.errors())


def format_error_list(errors: Sequence[Mapping[str, Any]]) -> str:
    """Join pydantic-style error dicts into one sentence.

    Messages raised by our own validators are used verbatim; anything else
    (missing fields, wrong types) is prefixed with the offending field.
    """
    messages = []
    for err in errors:
        ctx_error = (err.get("ctx") or {}).get("error")
        if err["type"] == "value_error" and ctx_error is not None:
            messages.append(str(ctx_error))
            continue
        field = ".".join(str(part) for part in err["loc"] if part != "body")
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return ", ".join(messages)
