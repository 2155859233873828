import uuid
from datetime import datetime
from sqlalchemy import (  # type: ignore
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship  # type: ignore

from core.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Genre(Base):
    __tablename__ = "genres"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True)
    books = relationship("Book", back_populates="genre")


class Book(Base):
    __tablename__ = "books"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(255), nullable=False, index=True)
    writer = Column(String(255), nullable=False)
    publisher = Column(String(255), nullable=False)
    isbn = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)
    publication_year = Column(Integer, nullable=True)
    condition = Column(String(16), nullable=True)
    price = Column(Integer, nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    genre_id = Column(
        String(36), ForeignKey("genres.id"), nullable=False, index=True
    )
    genre = relationship("Genre", back_populates="books")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_book_price_positive"),
        CheckConstraint("stock_quantity >= 0", name="ck_book_stock_non_negative"),
    )


__all__ = ["Genre", "Book"]
