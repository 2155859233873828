"""
Catalog domain models.

Read-only snapshots of books and genres. Repositories build them while the
session is open so services never touch lazy ORM attributes.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class BookCondition(Enum):
    """Physical condition of a second-hand or new book."""
    NEW = "NEW"
    LIKE_NEW = "LIKE_NEW"
    VERY_GOOD = "VERY_GOOD"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    POOR = "POOR"


@dataclass(frozen=True)
class GenreRecord:
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_orm(cls, row: Any) -> GenreRecord:
        return cls(
            id=row.id,
            name=row.name,
            description=row.description,
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=row.deleted_at,
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }


@dataclass(frozen=True)
class BookRecord:
    """Snapshot of a book row as read at one point in time."""
    id: str
    title: str
    price: int
    stock_quantity: int
    genre_id: str
    writer: str = ""
    publisher: str = ""
    isbn: Optional[str] = None
    description: Optional[str] = None
    publication_year: Optional[int] = None
    condition: Optional[str] = None
    genre_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_orm(cls, row: Any, genre_name: Optional[str] = None) -> BookRecord:
        return cls(
            id=row.id,
            title=row.title,
            price=row.price,
            stock_quantity=row.stock_quantity,
            genre_id=row.genre_id,
            writer=row.writer,
            publisher=row.publisher,
            isbn=row.isbn,
            description=row.description,
            publication_year=row.publication_year,
            condition=row.condition,
            genre_name=genre_name,
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=row.deleted_at,
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "writer": self.writer,
            "publisher": self.publisher,
            "isbn": self.isbn,
            "description": self.description,
            "publicationYear": self.publication_year,
            "condition": self.condition,
            "price": self.price,
            "stockQuantity": self.stock_quantity,
            "genreId": self.genre_id,
            "genre": self.genre_name,
        }
