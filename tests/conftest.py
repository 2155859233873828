"""Shared fixtures: an in-memory database and catalog seeding helpers."""

import os

# Must be set before any application module reads its configuration
os.environ["BOOKSTORE_ENV"] = "testing"

import pytest

from core.db import Base, make_engine, make_session_factory
import core.models  # noqa: F401
from repositories.book_repository import BookRepository
from repositories.genre_repository import GenreRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository
from services.statistics_service import StatisticsService
from services.transaction_service import TransactionService


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def books(session_factory):
    return BookRepository(session_factory)


@pytest.fixture
def genres(session_factory):
    return GenreRepository(session_factory)


@pytest.fixture
def transactions(session_factory):
    return TransactionRepository(session_factory)


@pytest.fixture
def users(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def transaction_service(books, transactions, users):
    return TransactionService(books=books, transactions=transactions, users=users)


@pytest.fixture
def statistics_service(transactions, books, genres):
    return StatisticsService(transactions=transactions, books=books, genres=genres)


@pytest.fixture
def buyer(users):
    """A registered user to own transactions."""
    return users.create_user("reader", "reader@example.com", "not-a-real-hash")


@pytest.fixture
def make_genre(genres):
    def _make(name="Fiction"):
        return genres.create_genre(name)
    return _make


@pytest.fixture
def make_book(books, make_genre):
    counter = {"n": 0}

    def _make(title=None, price=1000, stock=10, genre=None):
        counter["n"] += 1
        genre = genre or make_genre()
        return books.create_book(
            title=title or f"Book {counter['n']}",
            writer="Writer",
            publisher="Publisher",
            price=price,
            stock_quantity=stock,
            genre_id=genre.id,
        )
    return _make
