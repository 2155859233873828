"""
Transaction Service - purchase creation with stock reservation.

Creating a transaction happens in two phases:

1. Snapshot phase: validate the request, merge repeated books, read every
   referenced book in one batch and check all quantities against that
   snapshot. Nothing is written, so any failure here leaves the store
   untouched.
2. Commit phase: one atomic unit decrements stock with a conditional
   update per book and inserts the transaction with its items. A
   decrement that finds less stock than the snapshot promised aborts the
   whole unit with ``ConflictError``.
"""

from __future__ import annotations
from typing import Any, List, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from domain.models import PurchaseLine, TransactionRecord
from repositories.book_repository import BookRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository
from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from shared.validators import aggregate_purchase_items

logger = logging.getLogger(__name__)


class TransactionService:
    """Application service for sales transactions."""

    def __init__(
        self,
        books: BookRepository,
        transactions: TransactionRepository,
        users: UserRepository,
    ):
        self.books = books
        self.transactions = transactions
        self.users = users

    def create_transaction(self, user_id: Optional[str], items: Any) -> TransactionRecord:
        """
        Reserve stock and record a sale in one all-or-nothing step.

        Args:
            user_id: Authenticated principal owning the transaction
            items: Sequence of ``{bookId, quantity}`` line items

        Returns:
            The persisted transaction with its items

        Raises:
            ValidationError: malformed request
            AuthenticationError: the owner does not exist
            NotFoundError: unknown or deleted books (all ids listed)
            InsufficientStockError: a book has too little stock
            ConflictError: stock changed between the snapshot and the write
            UnexpectedError: storage failure
        """
        if user_id is None or not str(user_id).strip():
            raise ValidationError.single("user is required", "userId")

        requested = aggregate_purchase_items(items)
        # A signed token can outlive its account
        if self.users.get_by_id(user_id) is None:
            raise AuthenticationError("User no longer exists")

        lines, total_amount = self._check_against_snapshot(requested)

        def work(session: Session) -> TransactionRecord:
            # Stable lock order across concurrent requests
            for line in sorted(lines, key=lambda l: l.book_id):
                if not self.books.conditional_decrement_stock(session, line.book_id, line.quantity):
                    raise ConflictError(
                        f"Stock for {line.title} changed while the request was processed, please retry"
                    )
            return self.transactions.insert_transaction(session, user_id, total_amount, lines)

        try:
            record = self.transactions.run_atomic(work)
        except ConflictError:
            logger.warning(
                "transaction for user %s aborted by concurrent stock update", user_id
            )
            raise

        logger.info(
            "transaction %s created for user %s: %d book(s), total %d",
            record.id, user_id, len(record.items), record.total_amount,
        )
        return record

    def _check_against_snapshot(self, requested: dict) -> Tuple[List[PurchaseLine], int]:
        """Resolve books once and verify every aggregated quantity."""
        snapshot = {b.id: b for b in self.books.find_books_by_ids(requested, exclude_deleted=True)}

        missing = [book_id for book_id in requested if book_id not in snapshot]
        if missing:
            raise NotFoundError("Book", missing)

        lines: List[PurchaseLine] = []
        for book_id, quantity in requested.items():
            book = snapshot[book_id]
            if quantity > book.stock_quantity:
                raise InsufficientStockError(
                    book_id=book.id,
                    title=book.title,
                    requested=quantity,
                    available=book.stock_quantity,
                )
            lines.append(
                PurchaseLine(
                    book_id=book.id,
                    title=book.title,
                    quantity=quantity,
                    price=book.price,
                )
            )

        return lines, sum(line.subtotal for line in lines)

    def list_transactions(self, skip: int, limit: int) -> Tuple[int, List[TransactionRecord]]:
        return self.transactions.list_transactions(skip, limit)

    def get_transaction(self, transaction_id: str) -> TransactionRecord:
        record = self.transactions.get_by_id(transaction_id)
        if record is None:
            raise NotFoundError("Transaction", [transaction_id])
        return record
