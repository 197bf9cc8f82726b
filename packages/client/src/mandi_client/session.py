"""Client-side auth session.

Keeps the signed-in user's profile and tokens in the token store and exposes
login, register, logout and language updates to application code.
"""

import logging
from typing import Any

from mandi_client.client import MandiClient
from mandi_client.storage import TokenStore
from mandi_shared.schemas import AuthResult, RegistrationRequest, UserProfile

logger = logging.getLogger("mandi-client")


class AuthSession:
    """The authenticated user's state, persisted across restarts."""

    def __init__(self, client: MandiClient, store: TokenStore | None = None):
        self.client = client
        self.store = store or client.token_store
        self.user: UserProfile | None = None
        self.is_loading = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def restore(self) -> UserProfile | None:
        """Load a previously stored session. Needs both a token and a profile."""
        self.is_loading = True
        try:
            if self.store.access_token:
                self.user = self.store.load_user()
            return self.user
        finally:
            self.is_loading = False

    def _remember(self, result: AuthResult) -> None:
        if result.success and result.user and result.access_token:
            self.user = result.user
            self.store.save(
                access_token=result.access_token,
                refresh_token=result.refresh_token,
                user=result.user,
            )

    async def login(self, email: str, password: str) -> AuthResult:
        self.is_loading = True
        try:
            result = await self.client.login(email, password)
            self._remember(result)
            return result
        finally:
            self.is_loading = False

    async def register(self, data: RegistrationRequest | dict[str, Any]) -> AuthResult:
        self.is_loading = True
        try:
            result = await self.client.register(data)
            self._remember(result)
            return result
        finally:
            self.is_loading = False

    async def logout(self) -> None:
        """Tell the server, then forget everything locally, even if the call failed."""
        self.is_loading = True
        try:
            result = await self.client.logout()
            if not result.success:
                logger.warning(f"Logout error: {result.error}")
        finally:
            self.user = None
            self.store.clear()
            self.is_loading = False

    async def update_language_preference(self, language: str) -> AuthResult:
        result = await self.client.update_language_preference(language)
        if result.success and self.user is not None:
            self.user = self.user.model_copy(update={"preferred_language": language})
            self.store.save(user=self.user)
        return result
