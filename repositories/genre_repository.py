"""
Genre Repository for genre lookups and genre CRUD.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session, sessionmaker

from repositories.base_repository import BaseRepository
from core.models import Genre
from domain.models import GenreRecord
import logging

logger = logging.getLogger(__name__)


class GenreRepository(BaseRepository[Genre]):
    """Repository for Genre operations."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        super().__init__(Genre, session_factory)

    def find_genres_by_ids(
        self, ids: Iterable[str], exclude_deleted: bool = True
    ) -> List[GenreRecord]:
        """Batch lookup of genres; unknown ids are simply absent."""
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []

        def query_func(session: Session) -> List[GenreRecord]:
            query = session.query(Genre).filter(Genre.id.in_(wanted))
            if exclude_deleted:
                query = query.filter(Genre.deleted_at.is_(None))
            return [GenreRecord.from_orm(g) for g in query.all()]

        return self.execute_query(query_func)

    def get_active(self, genre_id: str) -> Optional[GenreRecord]:
        """Get a genre that has not been soft-deleted."""
        found = self.find_genres_by_ids([genre_id])
        return found[0] if found else None

    def list_genres(
        self,
        skip: int,
        limit: int,
        search: str = "",
        order_by_name: Optional[str] = None,
    ) -> Tuple[int, List[GenreRecord]]:
        """Page through active genres; returns ``(total, page)``."""
        def query_func(session: Session) -> Tuple[int, List[GenreRecord]]:
            query = session.query(Genre).filter(Genre.deleted_at.is_(None))
            if search:
                query = query.filter(Genre.name.ilike(f"%{search}%"))
            total = query.count()
            if order_by_name:
                order = Genre.name.asc() if order_by_name == "asc" else Genre.name.desc()
            else:
                order = Genre.created_at.desc()
            rows = query.order_by(order).offset(skip).limit(limit).all()
            return total, [GenreRecord.from_orm(g) for g in rows]

        return self.execute_query(query_func)

    def create_genre(self, name: str, description: Optional[str] = None) -> GenreRecord:
        def query_func(session: Session) -> GenreRecord:
            genre = Genre(name=name, description=description)
            session.add(genre)
            session.flush()
            return GenreRecord.from_orm(genre)

        return self.execute_write(query_func)

    def update_genre(self, genre_id: str, **fields) -> Optional[GenreRecord]:
        """Apply non-None fields to an active genre."""
        def query_func(session: Session) -> Optional[GenreRecord]:
            genre = (
                session.query(Genre)
                .filter(Genre.id == genre_id, Genre.deleted_at.is_(None))
                .first()
            )
            if genre is None:
                return None
            for key, value in fields.items():
                if value is not None and hasattr(genre, key):
                    setattr(genre, key, value)
            genre.updated_at = datetime.utcnow()
            session.flush()
            return GenreRecord.from_orm(genre)

        return self.execute_write(query_func)

    def soft_delete(self, genre_id: str) -> bool:
        def query_func(session: Session) -> bool:
            updated = (
                session.query(Genre)
                .filter(Genre.id == genre_id, Genre.deleted_at.is_(None))
                .update({Genre.deleted_at: datetime.utcnow()}, synchronize_session=False)
            )
            return updated == 1

        return self.execute_write(query_func)
