"""
Domain models - catalog, sales and account records.

Records are frozen snapshots built from ORM rows with ``from_orm`` and
rendered for the API with ``to_dict``.
"""

from domain.models.catalog import BookCondition, BookRecord, GenreRecord
from domain.models.sales import (
    PurchaseLine,
    TransactionItemRecord,
    TransactionRecord,
    TransactionStatistics,
)
from domain.models.user import UserRecord

__all__ = [
    "BookCondition",
    "BookRecord",
    "GenreRecord",
    "PurchaseLine",
    "TransactionItemRecord",
    "TransactionRecord",
    "TransactionStatistics",
    "UserRecord",
]
