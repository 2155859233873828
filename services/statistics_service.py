"""
Statistics Service - read-only aggregation over sales history.
"""

from __future__ import annotations
from typing import Dict, Optional, Tuple
import logging

from domain.models import TransactionStatistics
from repositories.book_repository import BookRepository
from repositories.genre_repository import GenreRepository
from repositories.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


def pick_extremes(totals: Dict[str, int]) -> Tuple[Optional[str], Optional[str]]:
    """
    Most and least popular keys of ``totals``.

    Only a strictly larger (or smaller) value replaces the current pick, so
    ties go to the key that comes first in iteration order.

    Returns:
        ``(most, least)``, both None when ``totals`` is empty
    """
    most = least = None
    for name, quantity in totals.items():
        if most is None or quantity > totals[most]:
            most = name
        if least is None or quantity < totals[least]:
            least = name
    return most, least


class StatisticsService:
    """Summary metrics over all recorded transactions."""

    def __init__(
        self,
        transactions: TransactionRepository,
        books: BookRepository,
        genres: GenreRepository,
    ):
        self.transactions = transactions
        self.books = books
        self.genres = genres

    def get_statistics(self) -> TransactionStatistics:
        total_transactions = self.transactions.count()
        average_amount = self.transactions.average_total_amount() if total_transactions else 0.0

        genre_totals = self.quantity_by_genre()
        most, least = pick_extremes(genre_totals)

        logger.debug(
            "statistics: %d transactions, %d genre(s) with sales",
            total_transactions, len(genre_totals),
        )
        return TransactionStatistics(
            total_transactions=total_transactions,
            average_amount=average_amount,
            most_popular_genre=most,
            least_popular_genre=least,
        )

    def quantity_by_genre(self) -> Dict[str, int]:
        """Units sold per live genre name, in order of first sale.

        Deleted books still count (the sale happened); books whose genre is
        deleted or missing are left out.
        """
        per_book = self.transactions.sum_quantity_grouped_by_book()
        if not per_book:
            return {}

        books = {b.id: b for b in self.books.find_books_by_ids(per_book, exclude_deleted=False)}
        genre_ids = [books[book_id].genre_id for book_id in per_book if book_id in books]
        genres = {
            g.id: g.name
            for g in self.genres.find_genres_by_ids(genre_ids, exclude_deleted=True)
        }

        totals: Dict[str, int] = {}
        for book_id, quantity in per_book.items():
            book = books.get(book_id)
            if book is None or book.genre_id not in genres:
                continue
            name = genres[book.genre_id]
            totals[name] = totals.get(name, 0) + quantity
        return totals
