"""
Catalog services - book and genre management with soft-delete.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging

from domain.models import BookRecord, GenreRecord
from repositories.book_repository import BookRepository
from repositories.genre_repository import GenreRepository
from shared.exceptions import DuplicateEntityError, NotFoundError, ValidationError
from shared.validators import book_field_errors, validate_required_text

logger = logging.getLogger(__name__)


class GenreService:
    """Genre CRUD."""

    def __init__(self, genres: GenreRepository):
        self.genres = genres

    def create_genre(self, name: str, description: Optional[str] = None) -> GenreRecord:
        errors = validate_required_text(name, "name")
        if errors:
            raise ValidationError(errors)
        genre = self.genres.create_genre(name.strip(), description)
        logger.info("genre %s created: %s", genre.id, genre.name)
        return genre

    def list_genres(
        self, skip: int, limit: int, search: str = "", order_by_name: Optional[str] = None
    ) -> Tuple[int, List[GenreRecord]]:
        return self.genres.list_genres(skip, limit, search=search, order_by_name=order_by_name)

    def get_genre(self, genre_id: str) -> GenreRecord:
        genre = self.genres.get_active(genre_id)
        if genre is None:
            raise NotFoundError("Genre")
        return genre

    def update_genre(
        self, genre_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> GenreRecord:
        if name is not None and not name.strip():
            raise ValidationError.single("name cannot be empty", "name")
        genre = self.genres.update_genre(
            genre_id, name=name.strip() if name else None, description=description
        )
        if genre is None:
            raise NotFoundError("Genre")
        return genre

    def delete_genre(self, genre_id: str) -> None:
        if not self.genres.soft_delete(genre_id):
            raise NotFoundError("Genre")
        logger.info("genre %s removed", genre_id)


class BookService:
    """Book CRUD.

    Creating a book that matches a soft-deleted one (same title, writer and
    publisher) restores it with the new values instead of adding a row.
    """

    def __init__(self, books: BookRepository, genres: GenreRepository):
        self.books = books
        self.genres = genres

    def create_book(self, payload: Dict[str, Any]) -> Tuple[BookRecord, bool]:
        """
        Create or restore a book.

        Returns:
            ``(book, restored)`` where ``restored`` is True when a
            soft-deleted book was brought back
        """
        errors = []
        for field in ("title", "writer", "publisher"):
            errors.extend(validate_required_text(payload.get(field), field))
        errors.extend(
            book_field_errors(
                price=payload.get("price"),
                stock_quantity=payload.get("stock_quantity"),
                publication_year=payload.get("publication_year"),
                condition=payload.get("condition"),
            )
        )
        if not payload.get("genre_id"):
            errors.append({"msg": "genreId is required", "path": "genreId"})
        if errors:
            raise ValidationError(errors)

        if self.genres.get_active(payload["genre_id"]) is None:
            raise NotFoundError("Genre")

        existing = self.books.find_by_identity(
            payload["title"], payload["writer"], payload["publisher"]
        )
        if existing is not None:
            if not existing.is_deleted:
                raise DuplicateEntityError("Book title already exists", field="title")
            restored = self.books.restore_book(existing.id, **payload)
            logger.info("book %s restored", existing.id)
            return restored, True

        book = self.books.create_book(**payload)
        logger.info("book %s created: %s", book.id, book.title)
        return book, False

    def list_books(self, skip: int, limit: int, **filters) -> Tuple[int, List[BookRecord]]:
        return self.books.list_books(skip, limit, **filters)

    def list_books_by_genre(
        self, genre_id: str, skip: int, limit: int, **filters
    ) -> Tuple[int, List[BookRecord]]:
        if self.genres.get_active(genre_id) is None:
            raise NotFoundError("Genre")
        return self.books.list_books(skip, limit, genre_id=genre_id, **filters)

    def get_book(self, book_id: str) -> BookRecord:
        book = self.books.get_active(book_id)
        if book is None:
            raise NotFoundError("Book")
        return book

    def update_book(self, book_id: str, changes: Dict[str, Any]) -> BookRecord:
        errors = book_field_errors(
            price=changes.get("price"),
            stock_quantity=changes.get("stock_quantity"),
            publication_year=changes.get("publication_year"),
            condition=changes.get("condition"),
            require_price_and_stock=False,
        )
        if errors:
            raise ValidationError(errors)

        existing = self.books.get_any(book_id)
        if existing is None:
            raise NotFoundError("Book")
        if existing.is_deleted:
            raise DuplicateEntityError(
                "This book has been deleted. Please recreate it using POST to restore it first"
            )

        title = changes.get("title")
        if title and title != existing.title and self.books.title_taken(title, exclude_id=book_id):
            raise DuplicateEntityError("Book title already exists", field="title")

        genre_id = changes.get("genre_id")
        if genre_id and self.genres.get_active(genre_id) is None:
            raise NotFoundError("Genre")

        updated = self.books.update_book(book_id, **changes)
        if updated is None:
            raise NotFoundError("Book")
        return updated

    def delete_book(self, book_id: str) -> None:
        if not self.books.soft_delete(book_id):
            raise NotFoundError("Book")
        logger.info("book %s removed", book_id)
