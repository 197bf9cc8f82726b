"""Database module for the API.

Provides the SQLAlchemy user model, async session management and the user store.
"""

from mandi_api.db.database import (
    Base,
    create_engine,
    create_session_factory,
    get_db,
    init_db,
)
from mandi_api.db.models import User
from mandi_api.db.repository import SqlAlchemyUserStore, UserStore

__all__ = [
    "Base",
    "SqlAlchemyUserStore",
    "User",
    "UserStore",
    "create_engine",
    "create_session_factory",
    "get_db",
    "init_db",
]
