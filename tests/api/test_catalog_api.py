"""HTTP-level tests for /genre, /books and the app-level routes."""

import pytest


@pytest.fixture
def genre_id(client, auth_headers):
    resp = client.post("/genre", json={"name": "Fantasy"}, headers=auth_headers)
    assert resp.status_code == 201
    return resp.json()["data"]["id"]


def _book_payload(genre_id, **overrides):
    payload = {
        "title": "The Hobbit",
        "writer": "J. R. R. Tolkien",
        "publisher": "Allen & Unwin",
        "publicationYear": 1937,
        "condition": "GOOD",
        "price": 1200,
        "stockQuantity": 4,
        "genreId": genre_id,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# APP
# =============================================================================


def test_health_check(client):
    resp = client.get("/health-check")

    assert resp.status_code == 200
    assert resp.json()["success"] is True


def test_unknown_route(client):
    resp = client.get("/no/such/route")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Endpoint not found"}


# =============================================================================
# GENRES
# =============================================================================


def test_genre_crud(client, auth_headers, genre_id):
    listed = client.get("/genre", headers=auth_headers)
    assert listed.json()["data"] == [{"id": genre_id, "name": "Fantasy"}]
    assert listed.json()["meta"]["total"] == 1

    renamed = client.patch(f"/genre/{genre_id}", json={"name": "High Fantasy"}, headers=auth_headers)
    assert renamed.status_code == 200
    assert renamed.json()["data"]["name"] == "High Fantasy"

    removed = client.delete(f"/genre/{genre_id}", headers=auth_headers)
    assert removed.json() == {"success": True, "message": "Genre removed successfully"}

    gone = client.get(f"/genre/{genre_id}", headers=auth_headers)
    assert gone.status_code == 404


def test_genre_list_ordering_and_search(client, auth_headers):
    for name in ("Horror", "Drama", "Humor"):
        client.post("/genre", json={"name": name}, headers=auth_headers)

    ordered = client.get("/genre?orderByName=asc", headers=auth_headers).json()["data"]
    assert [g["name"] for g in ordered] == ["Drama", "Horror", "Humor"]

    found = client.get("/genre?search=hu", headers=auth_headers).json()["data"]
    assert [g["name"] for g in found] == ["Humor"]


def test_genre_blank_name(client, auth_headers):
    resp = client.post("/genre", json={"name": "  "}, headers=auth_headers)

    assert resp.status_code == 422
    assert resp.json()["data"] == [{"msg": "name is required", "path": "name"}]


def test_genre_requires_token(client):
    assert client.get("/genre").status_code == 401


# =============================================================================
# BOOKS
# =============================================================================


def test_book_create_and_detail(client, auth_headers, genre_id):
    created = client.post("/books", json=_book_payload(genre_id), headers=auth_headers)

    assert created.status_code == 201
    assert created.json()["message"] == "Book added successfully"
    book_id = created.json()["data"]["id"]

    detail = client.get(f"/books/{book_id}", headers=auth_headers).json()["data"]
    assert detail["title"] == "The Hobbit"
    assert detail["stockQuantity"] == 4
    assert detail["genre"] == "Fantasy"
    assert "isbn" not in detail


def test_book_create_reports_every_bad_field(client, auth_headers, genre_id):
    resp = client.post(
        "/books",
        json=_book_payload(genre_id, title="", price=0, stockQuantity=-3),
        headers=auth_headers,
    )

    assert resp.status_code == 422
    paths = [e["path"] for e in resp.json()["data"]]
    assert paths == ["title", "price", "stockQuantity"]


def test_book_create_unknown_genre(client, auth_headers):
    resp = client.post("/books", json=_book_payload("nope"), headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Genre not found"


def test_book_duplicate_title(client, auth_headers, genre_id):
    client.post("/books", json=_book_payload(genre_id), headers=auth_headers)

    resp = client.post("/books", json=_book_payload(genre_id), headers=auth_headers)

    assert resp.status_code == 409
    assert resp.json()["message"] == "Book title already exists"


def test_book_delete_then_recreate_restores(client, auth_headers, genre_id):
    book_id = client.post("/books", json=_book_payload(genre_id), headers=auth_headers).json()["data"]["id"]
    client.delete(f"/books/{book_id}", headers=auth_headers)

    assert client.get(f"/books/{book_id}", headers=auth_headers).status_code == 404
    blocked = client.patch(f"/books/{book_id}", json={"price": 900}, headers=auth_headers)
    assert blocked.status_code == 409

    restored = client.post("/books", json=_book_payload(genre_id, stockQuantity=9), headers=auth_headers)

    assert restored.status_code == 200
    assert restored.json()["message"] == "Book restored successfully"
    assert restored.json()["data"]["id"] == book_id
    assert restored.json()["data"]["stockQuantity"] == 9


def test_book_update(client, auth_headers, genre_id):
    book_id = client.post("/books", json=_book_payload(genre_id), headers=auth_headers).json()["data"]["id"]

    resp = client.patch(f"/books/{book_id}", json={"price": 1500, "stockQuantity": 0}, headers=auth_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert (data["price"], data["stockQuantity"], data["title"]) == (1500, 0, "The Hobbit")
    assert data["updatedAt"]


def test_book_update_rejects_bad_price(client, auth_headers, genre_id):
    book_id = client.post("/books", json=_book_payload(genre_id), headers=auth_headers).json()["data"]["id"]

    resp = client.patch(f"/books/{book_id}", json={"price": -5}, headers=auth_headers)

    assert resp.status_code == 422


def test_book_list_filters_and_genre_listing(client, auth_headers, genre_id):
    other = client.post("/genre", json={"name": "Science"}, headers=auth_headers).json()["data"]["id"]
    client.post("/books", json=_book_payload(genre_id, title="Beta"), headers=auth_headers)
    client.post("/books", json=_book_payload(genre_id, title="Alpha"), headers=auth_headers)
    client.post(
        "/books",
        json=_book_payload(other, title="Cosmos", writer="Carl Sagan", condition="NEW"),
        headers=auth_headers,
    )

    everything = client.get("/books?orderByTitle=asc", headers=auth_headers).json()
    assert [b["title"] for b in everything["data"]] == ["Alpha", "Beta", "Cosmos"]
    assert everything["meta"]["total"] == 3

    searched = client.get("/books?search=sagan", headers=auth_headers).json()["data"]
    assert [b["title"] for b in searched] == ["Cosmos"]

    new_only = client.get("/books?condition=NEW", headers=auth_headers).json()["data"]
    assert [b["title"] for b in new_only] == ["Cosmos"]

    by_genre = client.get(f"/books/genre/{genre_id}?orderByTitle=desc", headers=auth_headers).json()["data"]
    assert [b["title"] for b in by_genre] == ["Beta", "Alpha"]

    missing = client.get("/books/genre/unknown", headers=auth_headers)
    assert missing.status_code == 404


def test_book_list_pagination(client, auth_headers, genre_id):
    for i in range(3):
        client.post("/books", json=_book_payload(genre_id, title=f"Vol {i}"), headers=auth_headers)

    page = client.get("/books?page=2&limit=2", headers=auth_headers).json()

    assert len(page["data"]) == 1
    assert page["meta"]["prev"] == 1
    assert page["meta"]["next"] is None
