"""SQLAlchemy models for marketplace users."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mandi_api.db.database import Base
from mandi_shared.schemas import UserProfile, UserType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Vendor or buyer account."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Authentication
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Profile
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[str] = mapped_column(String(10), nullable=False)
    preferred_language: Mapped[str] = mapped_column(String(10), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(10))

    # Timestamps (client-side defaults so they are readable right after flush)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (Index("ix_users_user_type", "user_type"),)

    def to_profile(self) -> UserProfile:
        """Sanitized view of the user, without the password hash."""
        return UserProfile(
            id=str(self.id),
            email=self.email,
            name=self.name,
            user_type=UserType(self.user_type),
            preferred_language=self.preferred_language,
        )
