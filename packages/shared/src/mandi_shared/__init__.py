"""Shared schemas for the Mandi marketplace API and client."""

from mandi_shared.schemas import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGE_CODES,
    SUPPORTED_LANGUAGES,
    AuthResult,
    Language,
    LanguageUpdateRequest,
    LoginRequest,
    RefreshRequest,
    RegistrationRequest,
    UserProfile,
    UserType,
    check_language_code,
    format_error_list,
    format_validation_error,
    is_supported_language,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "SUPPORTED_LANGUAGE_CODES",
    "AuthResult",
    "Language",
    "LanguageUpdateRequest",
    "LoginRequest",
    "RefreshRequest",
    "RegistrationRequest",
    "UserProfile",
    "UserType",
    "check_language_code",
    "format_error_list",
    "format_validation_error",
    "is_supported_language",
]
