"""
Book Repository for catalog lookups, stock reservation and book CRUD.
"""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import or_, update
from sqlalchemy.orm import Session, sessionmaker

from repositories.base_repository import BaseRepository
from core.models import Book, Genre
from domain.models import BookRecord
import logging

logger = logging.getLogger(__name__)


class BookRepository(BaseRepository[Book]):
    """Repository for Book operations."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        super().__init__(Book, session_factory)

    # ----------------------------------------------------------- reservation

    def find_books_by_ids(
        self, ids: Iterable[str], exclude_deleted: bool = True
    ) -> List[BookRecord]:
        """Batch lookup of books as one consistent snapshot.

        Unknown (or, with ``exclude_deleted``, soft-deleted) ids are absent
        from the result; callers compare against what they asked for.
        """
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []

        def query_func(session: Session) -> List[BookRecord]:
            query = session.query(Book).filter(Book.id.in_(wanted))
            if exclude_deleted:
                query = query.filter(Book.deleted_at.is_(None))
            return [BookRecord.from_orm(b) for b in query.all()]

        return self.execute_query(query_func)

    def conditional_decrement_stock(self, session: Session, book_id: str, amount: int) -> bool:
        """Decrement stock only if enough remains; runs in the caller's session.

        Returns False when the row is gone, soft-deleted, or holds fewer than
        ``amount`` units at write time.
        """
        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.deleted_at.is_(None),
                Book.stock_quantity >= amount,
            )
            .values(
                stock_quantity=Book.stock_quantity - amount,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        return result.rowcount == 1

    # ------------------------------------------------------------------ CRUD

    def get_active(self, book_id: str) -> Optional[BookRecord]:
        """Get a live book whose genre is live as well."""
        def query_func(session: Session) -> Optional[BookRecord]:
            row = (
                session.query(Book, Genre.name)
                .join(Genre, Book.genre_id == Genre.id)
                .filter(
                    Book.id == book_id,
                    Book.deleted_at.is_(None),
                    Genre.deleted_at.is_(None),
                )
                .first()
            )
            if row is None:
                return None
            book, genre_name = row
            return BookRecord.from_orm(book, genre_name=genre_name)

        return self.execute_query(query_func)

    def get_any(self, book_id: str) -> Optional[BookRecord]:
        """Get a book regardless of its soft-delete marker."""
        def query_func(session: Session) -> Optional[BookRecord]:
            book = session.get(Book, book_id)
            return BookRecord.from_orm(book) if book is not None else None

        return self.execute_query(query_func)

    def list_books(
        self,
        skip: int,
        limit: int,
        search: str = "",
        condition: Optional[str] = None,
        order_by_title: Optional[str] = None,
        order_by_publish_date: Optional[str] = None,
        genre_id: Optional[str] = None,
    ) -> Tuple[int, List[BookRecord]]:
        """Page through live books; returns ``(total, page)``."""
        def query_func(session: Session) -> Tuple[int, List[BookRecord]]:
            query = (
                session.query(Book, Genre.name)
                .join(Genre, Book.genre_id == Genre.id)
                .filter(Book.deleted_at.is_(None), Genre.deleted_at.is_(None))
            )
            if genre_id:
                query = query.filter(Book.genre_id == genre_id)
            if search:
                pattern = f"%{search}%"
                query = query.filter(
                    or_(
                        Book.title.ilike(pattern),
                        Book.writer.ilike(pattern),
                        Book.publisher.ilike(pattern),
                    )
                )
            if condition:
                query = query.filter(Book.condition == condition)

            total = query.count()

            order = []
            if order_by_title:
                order.append(Book.title.asc() if order_by_title == "asc" else Book.title.desc())
            if order_by_publish_date:
                order.append(
                    Book.publication_year.asc()
                    if order_by_publish_date == "asc"
                    else Book.publication_year.desc()
                )
            if not order:
                order.append(Book.created_at.desc())

            rows = query.order_by(*order).offset(skip).limit(limit).all()
            return total, [BookRecord.from_orm(b, genre_name=name) for b, name in rows]

        return self.execute_query(query_func)

    def find_by_identity(self, title: str, writer: str, publisher: str) -> Optional[BookRecord]:
        """Find a book by title, writer and publisher, preferring a live one."""
        def query_func(session: Session) -> Optional[BookRecord]:
            book = (
                session.query(Book)
                .filter(
                    Book.title == title,
                    Book.writer == writer,
                    Book.publisher == publisher,
                )
                .order_by(Book.deleted_at.isnot(None))
                .first()
            )
            return BookRecord.from_orm(book) if book is not None else None

        return self.execute_query(query_func)

    def title_taken(self, title: str, exclude_id: Optional[str] = None) -> bool:
        def query_func(session: Session) -> bool:
            query = session.query(Book.id).filter(
                Book.title == title, Book.deleted_at.is_(None)
            )
            if exclude_id:
                query = query.filter(Book.id != exclude_id)
            return query.first() is not None

        return self.execute_query(query_func)

    def create_book(self, **fields) -> BookRecord:
        def query_func(session: Session) -> BookRecord:
            book = Book(**fields)
            session.add(book)
            session.flush()
            return BookRecord.from_orm(book)

        return self.execute_write(query_func)

    def restore_book(self, book_id: str, **fields) -> Optional[BookRecord]:
        """Clear the soft-delete marker and overwrite the given fields."""
        def query_func(session: Session) -> Optional[BookRecord]:
            book = session.get(Book, book_id)
            if book is None:
                return None
            for key, value in fields.items():
                setattr(book, key, value)
            book.deleted_at = None
            book.updated_at = datetime.utcnow()
            session.flush()
            return BookRecord.from_orm(book)

        return self.execute_write(query_func)

    def update_book(self, book_id: str, **fields) -> Optional[BookRecord]:
        """Apply non-None fields to a live book."""
        def query_func(session: Session) -> Optional[BookRecord]:
            book = (
                session.query(Book)
                .filter(Book.id == book_id, Book.deleted_at.is_(None))
                .first()
            )
            if book is None:
                return None
            for key, value in fields.items():
                if value is not None and hasattr(book, key):
                    setattr(book, key, value)
            book.updated_at = datetime.utcnow()
            session.flush()
            return BookRecord.from_orm(book)

        return self.execute_write(query_func)

    def soft_delete(self, book_id: str) -> bool:
        def query_func(session: Session) -> bool:
            updated = (
                session.query(Book)
                .filter(Book.id == book_id, Book.deleted_at.is_(None))
                .update({Book.deleted_at: datetime.utcnow()}, synchronize_session=False)
            )
            return updated == 1

        return self.execute_write(query_func)
