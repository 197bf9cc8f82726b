"""HTTP client for the Mandi auth API.

Adds the stored access token to every request. When an authenticated call is
rejected (401/403), it refreshes the access token once with the stored refresh
token and replays the request; if the refresh fails, the stored tokens are
dropped and the first failure is returned.
"""

import logging
import os
from typing import Any

import httpx
from pydantic import ValidationError

from mandi_client.storage import TokenStore
from mandi_shared.schemas import AuthResult, RegistrationRequest

logger = logging.getLogger("mandi-client")

DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 10.0

# Statuses that mean "your access token was not accepted"
_AUTH_REJECTED = (401, 403)


def _parse_result(response: httpx.Response, fallback_error: str) -> AuthResult:
    """Turn an API response into an AuthResult, whatever the status."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_success and isinstance(body, dict):
        try:
            return AuthResult.model_validate(body)
        except ValidationError as e:
            logger.error(f"Unexpected response body: {e}")
            return AuthResult.failed(fallback_error)

    error = body.get("error") if isinstance(body, dict) else None
    return AuthResult.failed(error or fallback_error)


class MandiClient:
    """Async client for the ``/api/auth`` endpoints."""

    def __init__(
        self,
        token_store: TokenStore,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.token_store = token_store
        self.base_url = base_url or os.getenv("MANDI_API_URL", DEFAULT_API_URL)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "MandiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        token = self.token_store.access_token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _send(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        return await self._http.request(
            method, path, json=json, headers=self._auth_headers()
        )

    async def _send_authenticated(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        response = await self._send(method, path, json)
        if response.status_code not in _AUTH_REJECTED:
            return response

        refresh_token = self.token_store.refresh_token
        if not refresh_token:
            return response

        refreshed = await self.refresh(refresh_token)
        if not refreshed.success:
            logger.info("Session expired, dropping stored tokens")
            self.token_store.clear_tokens()
            return response

        return await self._send(method, path, json)

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def register(self, data: RegistrationRequest | dict[str, Any]) -> AuthResult:
        """Create an account. Does not touch the token store."""
        if isinstance(data, RegistrationRequest):
            data = data.model_dump(mode="json", by_alias=True, exclude_none=True)
        try:
            response = await self._send("POST", "/api/auth/register", data)
        except httpx.HTTPError as e:
            logger.error(f"Registration request failed: {e}")
            return AuthResult.failed("Registration failed")
        return _parse_result(response, "Registration failed")

    async def login(self, email: str, password: str) -> AuthResult:
        """Log in. Does not touch the token store."""
        try:
            response = await self._send(
                "POST", "/api/auth/login", {"email": email, "password": password}
            )
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e}")
            return AuthResult.failed("Login failed")
        return _parse_result(response, "Login failed")

    async def refresh(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for a new access token and store it."""
        try:
            response = await self._http.post(
                "/api/auth/refresh", json={"refreshToken": refresh_token}
            )
        except httpx.HTTPError as e:
            logger.error(f"Token refresh request failed: {e}")
            return AuthResult.failed("Token refresh failed")

        result = _parse_result(response, "Token refresh failed")
        if result.success and result.access_token:
            self.token_store.save(access_token=result.access_token)
        return result

    async def logout(self) -> AuthResult:
        try:
            response = await self._send_authenticated("POST", "/api/auth/logout")
        except httpx.HTTPError as e:
            logger.error(f"Logout request failed: {e}")
            return AuthResult.failed("Logout failed")
        return _parse_result(response, "Logout failed")

    async def update_language_preference(self, language: str) -> AuthResult:
        try:
            response = await self._send_authenticated(
                "PUT", "/api/auth/language", {"language": language}
            )
        except httpx.HTTPError as e:
            logger.error(f"Language update request failed: {e}")
            return AuthResult.failed("Language update failed")
        return _parse_result(response, "Language update failed")
