"""HTTP-level tests for /transactions."""

from app import app
from repositories.transaction_repository import TransactionRepository
from routes.transactions import get_transaction_service
from services.statistics_service import StatisticsService
from services.transaction_service import TransactionService
from shared.exceptions import UnexpectedError
from tests.stubs import StaleSnapshotBookRepository
from utils.auth import mint_jwt_token


def test_create_requires_token(client, make_book):
    book = make_book()

    resp = client.post("/transactions", json={"items": [{"bookId": book.id, "quantity": 1}]})

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Authorization header missing"}


def test_create_rejects_bad_token(client, make_book):
    book = make_book()

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 1}]},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


def test_create_transaction(client, auth_headers, books, buyer, make_book):
    book = make_book(price=1000, stock=10)

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 3}]},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Transaction created successfully"
    data = body["data"]
    assert data["userId"] == buyer.id
    assert data["totalAmount"] == 3000
    assert [(i["bookId"], i["quantity"], i["price"]) for i in data["items"]] == [(book.id, 3, 1000)]
    assert books.get_any(book.id).stock_quantity == 7


def test_create_validation_envelope(client, auth_headers):
    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": "", "quantity": 0}]},
        headers=auth_headers,
    )

    assert resp.status_code == 422
    assert resp.json() == {
        "success": False,
        "message": "Validation error",
        "data": [
            {"msg": "bookId is required", "path": "items[0].bookId"},
            {"msg": "quantity must be a positive integer", "path": "items[0].quantity"},
        ],
    }


def test_create_with_empty_items(client, auth_headers):
    resp = client.post("/transactions", json={"items": []}, headers=auth_headers)

    assert resp.status_code == 422
    assert resp.json()["data"] == [{"msg": "Items cannot be empty", "path": "items"}]


def test_create_with_missing_body_field(client, auth_headers):
    resp = client.post("/transactions", json={}, headers=auth_headers)

    assert resp.status_code == 422


def test_create_unknown_book(client, auth_headers):
    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": "ghost", "quantity": 1}]},
        headers=auth_headers,
    )

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Book not found: ghost"}


def test_create_insufficient_stock(client, auth_headers, make_book):
    book = make_book(title="Dune", stock=1)

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 2}]},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Not enough stock for Dune"}


def test_storage_failure_is_opaque(client, auth_headers, make_book, monkeypatch):
    book = make_book()

    def broken(self, work):
        raise UnexpectedError("run_atomic", original_exception=RuntimeError("disk full"))

    monkeypatch.setattr(TransactionRepository, "run_atomic", broken)

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 1}]},
        headers=auth_headers,
    )

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}


def test_list_and_detail(client, auth_headers, buyer, make_book):
    book = make_book(stock=10)
    for qty in (1, 2, 3):
        client.post(
            "/transactions",
            json={"items": [{"bookId": book.id, "quantity": qty}]},
            headers=auth_headers,
        )

    resp = client.get("/transactions?page=1&limit=2", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 2
    assert body["meta"]["total"] == 3
    assert body["meta"]["totalPages"] == 2
    assert body["data"][0]["user"] == {"id": buyer.id, "username": buyer.username}

    transaction_id = body["data"][0]["id"]
    detail = client.get(f"/transactions/{transaction_id}", headers=auth_headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["id"] == transaction_id
    assert detail.json()["data"]["items"][0]["title"] == book.title


def test_detail_not_found(client, auth_headers):
    resp = client.get("/transactions/missing", headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_statistics(client, auth_headers, make_genre, make_book):
    fantasy = make_book(genre=make_genre("Fantasy"), price=500, stock=10)
    drama = make_book(genre=make_genre("Drama"), price=1500, stock=10)
    client.post(
        "/transactions",
        json={"items": [{"bookId": fantasy.id, "quantity": 4}]},
        headers=auth_headers,
    )
    client.post(
        "/transactions",
        json={"items": [{"bookId": drama.id, "quantity": 1}]},
        headers=auth_headers,
    )

    resp = client.get("/transactions/statistics", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "totalTransactions": 2,
        "averageAmount": 1750,
        "mostPopularGenre": "Fantasy",
        "leastPopularGenre": "Drama",
    }


def test_statistics_when_empty(client, auth_headers):
    resp = client.get("/transactions/statistics", headers=auth_headers)

    assert resp.json()["data"] == {
        "totalTransactions": 0,
        "averageAmount": 0,
        "mostPopularGenre": None,
        "leastPopularGenre": None,
    }


def test_token_for_unknown_user_reserves_nothing(client, books, transactions, make_book):
    book = make_book(stock=5)
    token = mint_jwt_token("u:ghost-user")

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 2}]},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "User no longer exists"}
    assert books.get_any(book.id).stock_quantity == 5
    assert transactions.count() == 0


def test_concurrent_stock_change_returns_conflict(
    client, auth_headers, session_factory, books, transactions, users, make_book
):
    book = make_book(stock=10)
    snapshot = books.find_books_by_ids([book.id])
    # Another sale commits after the snapshot was read
    books.update_book(book.id, stock_quantity=3)

    app.dependency_overrides[get_transaction_service] = lambda: TransactionService(
        books=StaleSnapshotBookRepository(session_factory, snapshot),
        transactions=transactions,
        users=users,
    )

    resp = client.post(
        "/transactions",
        json={"items": [{"bookId": book.id, "quantity": 6}]},
        headers=auth_headers,
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == f"Stock for {book.title} changed while the request was processed, please retry"
    assert set(body) == {"success", "message"}
    assert books.get_any(book.id).stock_quantity == 3
    assert transactions.count() == 0


def test_unhandled_error_renders_json_envelope(client, auth_headers, monkeypatch):
    def explode(self):
        raise RuntimeError("division by zero in aggregation")

    monkeypatch.setattr(StatisticsService, "get_statistics", explode)

    resp = client.get("/transactions/statistics", headers=auth_headers)

    assert app.debug is False
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}
