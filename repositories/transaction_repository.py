"""
Transaction Repository for sales persistence and sales aggregates.

Transactions and their items are append-only: rows are inserted together
inside ``run_atomic`` and never updated afterwards.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload, sessionmaker

from repositories.base_repository import BaseRepository
from core.models import Transaction, TransactionItem
from domain.models import PurchaseLine, TransactionItemRecord, TransactionRecord
from shared.exceptions import BookstoreError, ConflictError, UnexpectedError
import logging

logger = logging.getLogger(__name__)

R = TypeVar('R')

# serialization_failure, deadlock_detected, lock_not_available
_RETRYABLE_PGCODES = {"40001", "40P01", "55P03"}


def _is_concurrency_failure(exc: SQLAlchemyError) -> bool:
    """Whether a database error was caused by a competing writer."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) in _RETRYABLE_PGCODES:
        return True
    text = str(orig or exc).lower()
    if isinstance(exc, IntegrityError):
        return "ck_book_stock_non_negative" in text
    if isinstance(exc, OperationalError):
        return "database is locked" in text or "deadlock" in text
    return False


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction operations."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        super().__init__(Transaction, session_factory)

    def run_atomic(self, work: Callable[[Session], R]) -> R:
        """Run ``work(session)`` as one all-or-nothing database transaction.

        Raises:
            ConflictError: a competing writer invalidated the work
            UnexpectedError: any other storage failure
        """
        session = self.get_session()
        try:
            with session.begin():
                return work(session)
        except BookstoreError:
            raise
        except SQLAlchemyError as e:
            if _is_concurrency_failure(e):
                logger.warning(f"Atomic unit aborted by concurrent update: {e}")
                raise ConflictError(original_exception=e) from e
            logger.error(f"Atomic unit failed: {e}")
            raise UnexpectedError("run_atomic", original_exception=e) from e
        finally:
            session.close()

    def insert_transaction(
        self,
        session: Session,
        user_id: str,
        total_amount: int,
        lines: Sequence[PurchaseLine],
    ) -> TransactionRecord:
        """Insert a transaction with one item per line, in line order."""
        transaction = Transaction(user_id=user_id, total_amount=total_amount)
        for position, line in enumerate(lines):
            transaction.items.append(
                TransactionItem(
                    book_id=line.book_id,
                    position=position,
                    quantity=line.quantity,
                    price=line.price,
                )
            )
        session.add(transaction)
        session.flush()

        items = [
            TransactionItemRecord(
                id=item.id,
                book_id=line.book_id,
                title=line.title,
                quantity=line.quantity,
                price=line.price,
            )
            for item, line in zip(transaction.items, lines)
        ]
        return TransactionRecord(
            id=transaction.id,
            user_id=transaction.user_id,
            total_amount=transaction.total_amount,
            created_at=transaction.created_at,
            items=items,
        )

    # ------------------------------------------------------------ aggregates

    def average_total_amount(self) -> float:
        """Mean ``total_amount`` over all transactions, 0 when there are none."""
        def query_func(session: Session) -> float:
            avg = session.query(func.avg(Transaction.total_amount)).scalar()
            return float(avg) if avg is not None else 0.0

        return self.execute_query(query_func)

    def sum_quantity_grouped_by_book(self) -> Dict[str, int]:
        """Units sold per book.

        The dict is ordered by each book's first sale (lowest item id), so
        iteration order is stable for a given history.
        """
        def query_func(session: Session) -> Dict[str, int]:
            rows = (
                session.query(
                    TransactionItem.book_id,
                    func.sum(TransactionItem.quantity),
                )
                .group_by(TransactionItem.book_id)
                .order_by(func.min(TransactionItem.id))
                .all()
            )
            return {book_id: int(total or 0) for book_id, total in rows}

        return self.execute_query(query_func)

    # ----------------------------------------------------------------- reads

    def _with_details(self, session: Session):
        return session.query(Transaction).options(
            selectinload(Transaction.items).joinedload(TransactionItem.book),
            joinedload(Transaction.user),
        )

    def list_transactions(self, skip: int, limit: int) -> Tuple[int, List[TransactionRecord]]:
        """Newest first; returns ``(total, page)``."""
        def query_func(session: Session) -> Tuple[int, List[TransactionRecord]]:
            total = session.query(Transaction).count()
            rows = (
                self._with_details(session)
                .order_by(Transaction.created_at.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
            return total, [TransactionRecord.from_orm(t, include_user=True) for t in rows]

        return self.execute_query(query_func)

    def get_by_id(self, transaction_id: str) -> Optional[TransactionRecord]:
        def query_func(session: Session) -> Optional[TransactionRecord]:
            row = (
                self._with_details(session)
                .filter(Transaction.id == transaction_id)
                .first()
            )
            return TransactionRecord.from_orm(row, include_user=True) if row else None

        return self.execute_query(query_func)
