"""
Sales domain models.

Purchase requests, persisted transactions and the statistics summary.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PurchaseLine:
    """One distinct book in a validated purchase request.

    ``quantity`` is the aggregated quantity after duplicate lines for the
    same book were merged; ``price`` is the unit price captured from the
    snapshot read.
    """
    book_id: str
    title: str
    quantity: int
    price: int

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class TransactionItemRecord:
    book_id: str
    title: Optional[str]
    quantity: int
    price: int
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bookId": self.book_id,
            "title": self.title,
            "quantity": self.quantity,
            "price": self.price,
        }


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    user_id: str
    total_amount: int
    created_at: datetime
    items: List[TransactionItemRecord] = field(default_factory=list)
    username: Optional[str] = None

    @classmethod
    def from_orm(cls, row: Any, include_user: bool = False) -> TransactionRecord:
        items = [
            TransactionItemRecord(
                id=item.id,
                book_id=item.book_id,
                title=item.book.title if item.book is not None else None,
                quantity=item.quantity,
                price=item.price,
            )
            for item in row.items
        ]
        username = None
        if include_user and row.user is not None:
            username = row.user.username
        return cls(
            id=row.id,
            user_id=row.user_id,
            total_amount=row.total_amount,
            created_at=row.created_at,
            items=items,
            username=username,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "totalAmount": self.total_amount,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "items": [item.to_dict() for item in self.items],
        }
        if self.username is not None:
            data["user"] = {"id": self.user_id, "username": self.username}
        return data


@dataclass(frozen=True)
class TransactionStatistics:
    total_transactions: int
    average_amount: float
    most_popular_genre: Optional[str]
    least_popular_genre: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTransactions": self.total_transactions,
            "averageAmount": self.average_amount,
            "mostPopularGenre": self.most_popular_genre,
            "leastPopularGenre": self.least_popular_genre,
        }
