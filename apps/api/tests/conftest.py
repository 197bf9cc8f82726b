"""Shared fixtures for the API tests."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from mandi_api.auth.errors import DuplicateEmailError
from mandi_api.auth.service import AuthService
from mandi_api.config import Settings
from mandi_api.db.models import User
from mandi_api.main import create_app


class InMemoryUserStore:
    """UserStore that keeps users in a dict and counts writes."""

    def __init__(self):
        self.users: dict[str, User] = {}
        self.writes = 0

    async def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id: str) -> User | None:
        return self.users.get(str(user_id))

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        user_type: str,
        preferred_language: str,
        phone_number: str | None = None,
    ) -> User:
        self.writes += 1
        if await self.find_by_email(email) is not None:
            raise DuplicateEmailError()
        user = User(
            id=uuid4(),
            email=email,
            password_hash=password_hash,
            name=name,
            user_type=user_type,
            preferred_language=preferred_language,
            phone_number=phone_number,
        )
        self.users[str(user.id)] = user
        return user

    async def update_language(self, user_id: str, language: str) -> User | None:
        user = self.users.get(str(user_id))
        if user is None:
            return None
        self.writes += 1
        user.preferred_language = language
        return user


def make_registration(**overrides) -> dict:
    """A valid registration payload (camelCase, as sent over HTTP)."""
    payload = {
        "email": "a@test.io",
        "password": "password123",
        "name": "Ann",
        "preferredLanguage": "hi",
        "userType": "BUYER",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Development settings with fixed secrets, cheap bcrypt and a temp SQLite file."""
    return Settings(
        jwt_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'mandi-test.db'}",
    )


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def service(store, settings) -> AuthService:
    return AuthService(store, settings)


@pytest.fixture
def client(settings):
    """Test client running the app lifespan (creates tables)."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def registered(client) -> dict:
    """Register the default user and return the response body."""
    response = client.post("/api/auth/register", json=make_registration())
    assert response.status_code == 201
    return response.json()
