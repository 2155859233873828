"""
User Repository for account lookups and registration.
"""

from __future__ import annotations
from typing import Optional, Tuple
from sqlalchemy.orm import Session, sessionmaker

from repositories.base_repository import BaseRepository
from core.models import User
from domain.models import UserRecord
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user accounts; password hashes stay inside this layer."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        super().__init__(User, session_factory)

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Get user by id."""
        def query_func(session: Session) -> Optional[UserRecord]:
            user = session.get(User, user_id)
            return UserRecord.from_orm(user) if user is not None else None

        return self.execute_query(query_func)

    def get_credentials(self, email: str) -> Optional[Tuple[UserRecord, str]]:
        """Get user and stored password hash by email address."""
        def query_func(session: Session) -> Optional[Tuple[UserRecord, str]]:
            user = (
                session.query(User)
                .filter(User.email == email)
                .first()
            )
            if user is None:
                return None
            return UserRecord.from_orm(user), user.password_hash

        return self.execute_query(query_func)

    def email_exists(self, email: str) -> bool:
        def query_func(session: Session) -> bool:
            return (
                session.query(User.id)
                .filter(User.email == email)
                .first()
            ) is not None

        return self.execute_query(query_func)

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user."""
        def query_func(session: Session) -> UserRecord:
            user = User(
                username=username,
                email=email,
                password_hash=password_hash,
            )
            session.add(user)
            session.flush()
            return UserRecord.from_orm(user)

        return self.execute_write(query_func)
