"""User storage used by the auth service.

``UserStore`` is the collaborator interface the auth service depends on;
``SqlAlchemyUserStore`` is the production implementation on an AsyncSession.
"""

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mandi_api.auth.errors import DuplicateEmailError
from mandi_api.db.models import User

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """Persistence operations the auth service needs."""

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: str) -> User | None: ...

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
        """Persist a new user.

        Raises:
            DuplicateEmailError: If the email is already taken.
        """
        ...

    async def update_language(self, user_id: str, language: str) -> User | None:
        """Set a user's preferred language. Returns None if the user is gone."""
        ...


class SqlAlchemyUserStore:
    """UserStore backed by the ``users`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> User | None:
        try:
            key = UUID(str(user_id))
        except ValueError:
            return None
        result = await self.db.execute(select(User).where(User.id == key))
        return result.scalar_one_or_none()

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
        user = User(
            email=email,
            password_hash=password_hash,
            name=name,
            user_type=user_type,
            preferred_language=preferred_language,
            phone_number=phone_number,
        )
        self.db.add(user)
        try:
            # The unique constraint on email settles concurrent registrations
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"Duplicate registration rejected by database: {email}")
            raise DuplicateEmailError() from e
        logger.debug(f"Created user {user.id}: {email}")
        return user

    async def update_language(self, user_id: str, language: str) -> User | None:
        user = await self.find_by_id(user_id)
        if user is None:
            return None
        user.preferred_language = language
        await self.db.commit()
        logger.debug(f"Updated language for user {user.id}: {language}")
        return user
