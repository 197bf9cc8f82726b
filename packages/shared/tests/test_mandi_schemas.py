"""Tests for the shared marketplace schemas."""

import pytest
from pydantic import ValidationError

from mandi_shared.schemas import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGE_CODES,
    SUPPORTED_LANGUAGES,
    AuthResult,
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


def registration(**overrides) -> dict:
    data = {
        "email": "vendor@mandi.in",
        "password": "password123",
        "name": "Ravi",
        "preferredLanguage": "ta",
        "userType": "VENDOR",
    }
    data.update(overrides)
    return data


def profile() -> UserProfile:
    return UserProfile(
        id="5d1c0b1e-0000-4000-8000-000000000001",
        email="vendor@mandi.in",
        name="Ravi",
        user_type=UserType.VENDOR,
        preferred_language="ta",
    )


# =============================================================================
# Languages
# =============================================================================


class TestLanguages:
    """Tests for the supported language table."""

    def test_supported_codes(self):
        assert SUPPORTED_LANGUAGE_CODES == {
            "en", "hi", "bn", "te", "mr", "ta", "gu", "kn", "ml", "pa", "or"
        }
        assert len(SUPPORTED_LANGUAGES) == 11

    def test_default_is_supported(self):
        assert is_supported_language(DEFAULT_LANGUAGE)

    def test_every_language_has_native_name(self):
        for lang in SUPPORTED_LANGUAGES:
            assert lang.native_name
            assert lang.name

    def test_check_language_code(self):
        assert check_language_code("hi") == "hi"

        with pytest.raises(ValueError, match="at least 2 characters"):
            check_language_code("h")
        with pytest.raises(ValueError, match="Unsupported language code: fr"):
            check_language_code("fr")


# =============================================================================
# Requests
# =============================================================================


class TestRegistrationRequest:
    """Tests for registration validation."""

    def test_valid_registration_from_camel_case(self):
        """camelCase JSON keys map onto snake_case fields."""
        request = RegistrationRequest.model_validate(registration())

        assert request.preferred_language == "ta"
        assert request.user_type is UserType.VENDOR
        assert request.phone_number is None

    def test_populate_by_field_name(self):
        request = RegistrationRequest(
            email="buyer@mandi.in",
            password="password123",
            name="Meena",
            preferred_language="en",
            user_type=UserType.BUYER,
        )

        assert request.user_type is UserType.BUYER

    def test_phone_number_keeps_digits_only(self):
        request = RegistrationRequest.model_validate(
            registration(phoneNumber="98765-43210")
        )

        assert request.phone_number == "9876543210"

    @pytest.mark.parametrize("phone", ["", "  "])
    def test_blank_phone_number_is_none(self, phone):
        request = RegistrationRequest.model_validate(registration(phoneNumber=phone))

        assert request.phone_number is None

    def test_email_is_kept_as_sent(self):
        request = RegistrationRequest.model_validate(
            registration(email="Vendor@Mandi.in")
        )

        assert request.email == "Vendor@Mandi.in"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"email": "not-an-email"}, "Invalid email format"),
            ({"email": "Ravi <vendor@mandi.in>"}, "Invalid email format"),
            ({"email": " vendor@mandi.in "}, "Invalid email format"),
            ({"password": "1234567"}, "Password must be at least 8 characters"),
            (
                {"password": "  pass  "},
                "Password must contain at least 8 non-whitespace characters",
            ),
            ({"name": "R"}, "Name must be at least 2 characters"),
            ({"name": " R "}, "Name must contain at least 2 non-whitespace characters"),
            ({"preferredLanguage": "x"}, "Language code must be at least 2 characters"),
            ({"preferredLanguage": "fr"}, "Unsupported language code: fr"),
            ({"userType": "ADMIN"}, "User type must be VENDOR or BUYER"),
            ({"phoneNumber": "12345"}, "Phone number must contain exactly 10 digits"),
        ],
    )
    def test_invalid_fields(self, overrides, message):
        with pytest.raises(ValidationError) as exc_info:
            RegistrationRequest.model_validate(registration(**overrides))

        assert format_validation_error(exc_info.value) == message

    def test_all_violations_are_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            RegistrationRequest.model_validate(
                registration(password="short", name="R")
            )

        assert format_validation_error(exc_info.value) == (
            "Password must be at least 8 characters, "
            "Name must be at least 2 characters"
        )

    def test_missing_field_names_the_field(self):
        data = registration()
        del data["email"]

        with pytest.raises(ValidationError) as exc_info:
            RegistrationRequest.model_validate(data)

        assert format_validation_error(exc_info.value).startswith("email: ")


class TestOptionalRequests:
    """Login, refresh and language payloads tolerate missing fields."""

    def test_login_request(self):
        assert LoginRequest.model_validate({}).email is None
        assert LoginRequest.model_validate({"email": "a@b.in"}).password is None

    def test_refresh_request_alias(self):
        request = RefreshRequest.model_validate({"refreshToken": "abc"})

        assert request.refresh_token == "abc"

    def test_language_update_request(self):
        assert LanguageUpdateRequest.model_validate({"language": "bn"}).language == "bn"


# =============================================================================
# Results
# =============================================================================


class TestAuthResult:
    """Tests for the success/error exclusivity of AuthResult."""

    def test_success_dump_uses_camel_case(self):
        result = AuthResult(
            success=True,
            user=profile(),
            access_token="access",
            refresh_token="refresh",
            expires_in=900,
        )

        data = result.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert data["accessToken"] == "access"
        assert data["refreshToken"] == "refresh"
        assert data["expiresIn"] == 900
        assert data["user"]["preferredLanguage"] == "ta"
        assert "error" not in data

    def test_failed_result(self):
        result = AuthResult.failed("Invalid email or password", "invalid_credentials")

        assert result.success is False
        assert result.error_code == "invalid_credentials"
        assert result.model_dump(by_alias=True, exclude_none=True) == {
            "success": False,
            "error": "Invalid email or password",
        }

    def test_success_cannot_carry_error(self):
        with pytest.raises(ValidationError):
            AuthResult(success=True, error="boom")

    def test_failure_requires_error(self):
        with pytest.raises(ValidationError):
            AuthResult(success=False)

    def test_failure_cannot_carry_tokens(self):
        with pytest.raises(ValidationError):
            AuthResult(success=False, error="boom", access_token="access")
        with pytest.raises(ValidationError):
            AuthResult(success=False, error="boom", user=profile())


class TestFormatErrorList:
    """Tests for turning error dicts into a sentence."""

    def test_body_prefix_is_dropped(self):
        errors = [
            {"type": "missing", "loc": ("body", "email"), "msg": "Field required"},
            {"type": "string_type", "loc": ("body",), "msg": "Input should be a valid string"},
        ]

        assert format_error_list(errors) == (
            "email: Field required, Input should be a valid string"
        )

    def test_value_errors_are_verbatim(self):
        errors = [
            {
                "type": "value_error",
                "loc": ("body", "password"),
                "msg": "Value error, Password must be at least 8 characters",
                "ctx": {"error": ValueError("Password must be at least 8 characters")},
            }
        ]

        assert format_error_list(errors) == "Password must be at least 8 characters"
