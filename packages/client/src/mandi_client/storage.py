"""Local persistent storage for the client's tokens and profile.

A small JSON file with the same three keys the web frontend keeps in
localStorage: ``authToken``, ``refreshToken`` and ``userData``.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from mandi_shared.schemas import UserProfile

logger = logging.getLogger("mandi-client")

AUTH_TOKEN_KEY = "authToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_DATA_KEY = "userData"


class TokenStore:
    """JSON-file backed token and profile storage."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading stored auth data: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    @property
    def access_token(self) -> str | None:
        return self._read().get(AUTH_TOKEN_KEY)

    @property
    def refresh_token(self) -> str | None:
        return self._read().get(REFRESH_TOKEN_KEY)

    def load_user(self) -> UserProfile | None:
        """Return the stored profile, or None.

        Stored data that cannot be parsed wipes all stored auth state.
        """
        raw = self._read().get(USER_DATA_KEY)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Error parsing stored user data: {e}")
            self.clear()
            return None

    def save(
        self,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
        user: UserProfile | None = None,
    ) -> None:
        """Store whichever values are given, leaving the others untouched."""
        data = self._read()
        if access_token is not None:
            data[AUTH_TOKEN_KEY] = access_token
        if refresh_token is not None:
            data[REFRESH_TOKEN_KEY] = refresh_token
        if user is not None:
            data[USER_DATA_KEY] = user.model_dump_json(by_alias=True)
        self._write(data)

    def clear_tokens(self) -> None:
        data = self._read()
        data.pop(AUTH_TOKEN_KEY, None)
        data.pop(REFRESH_TOKEN_KEY, None)
        self._write(data)

    def clear(self) -> None:
        """Forget tokens and profile."""
        if self.path.exists():
            self.path.unlink()
