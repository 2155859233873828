"""Facade re-export for ORM models.

All real model definitions live under core/db_models/.
"""

# flake8: noqa

from core.db import Base

from core.db_models.catalog import Genre, Book
from core.db_models.transaction import Transaction, TransactionItem
from core.db_models.user import User

__all__ = [
    # Base
    "Base",
    # Catalog
    "Genre",
    "Book",
    # Sales
    "Transaction",
    "TransactionItem",
    # Accounts
    "User",
]
