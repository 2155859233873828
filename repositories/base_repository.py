"""
Base Repository class providing common database operations.
"""

from __future__ import annotations
from typing import Callable, Optional, Type, TypeVar, Generic
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from core.db import Base, get_session_factory
from shared.exceptions import BookstoreError, UnexpectedError
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Base)
R = TypeVar('R')


class BaseRepository(Generic[T]):
    """Base repository class with common query plumbing.

    The session factory is injected so tests and callers decide which
    database a repository talks to.
    """

    def __init__(self, model: Type[T], session_factory: Optional[sessionmaker] = None):
        self.model = model
        self._session_factory = session_factory

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    def get_session(self) -> Session:
        """Open a new database session."""
        return self.session_factory()

    def execute_query(self, query_func: Callable[..., R], *args, **kwargs) -> R:
        """Execute custom query with session management."""
        session = self.get_session()
        try:
            return query_func(session, *args, **kwargs)
        except BookstoreError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error executing {self.model.__name__} query: {e}")
            session.rollback()
            raise UnexpectedError(
                f"{self.model.__name__.lower()}_query", original_exception=e
            ) from e
        finally:
            session.close()

    def execute_write(self, query_func: Callable[..., R], *args, **kwargs) -> R:
        """Execute a write in its own transaction, committing on success."""
        def _write(session: Session) -> R:
            result = query_func(session, *args, **kwargs)
            session.commit()
            return result

        return self.execute_query(_write)

    def count(self) -> int:
        """Count total entities."""
        def query_func(session: Session) -> int:
            return session.query(self.model).count()

        return self.execute_query(query_func)
