"""HTTP-level tests for /auth."""

from utils.auth import mint_jwt_token


def _register(client, email="ada@example.com", password="secret123", username="ada"):
    return client.post(
        "/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def test_register_login_and_profile(client):
    created = _register(client)
    assert created.status_code == 201
    user = created.json()["data"]
    assert user["email"] == "ada@example.com"
    assert "password" not in user and "passwordHash" not in user

    login = client.post("/auth/login", json={"email": "ADA@example.com", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["data"]["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == user["id"]


def test_register_duplicate_email(client):
    _register(client)

    resp = _register(client, username="other")

    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "Email already exists"}


def test_register_short_password(client):
    resp = _register(client, password="abc")

    assert resp.status_code == 422
    assert resp.json()["data"] == [
        {"msg": "Password must be at least 6 characters", "path": "password"}
    ]


def test_register_invalid_email(client):
    resp = _register(client, email="not-an-email")

    assert resp.status_code == 422
    assert resp.json()["data"][0]["path"] == "email"


def test_login_wrong_password(client):
    _register(client)

    resp = client.post("/auth/login", json={"email": "ada@example.com", "password": "wrong-pass"})

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid credentials"}


def test_login_unknown_email(client):
    resp = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever"})

    assert resp.status_code == 401


def test_me_rejects_malformed_header(client):
    resp = client.get("/auth/me", headers={"Authorization": "Token abc"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid authorization header"


def test_me_for_vanished_user(client):
    token = mint_jwt_token("u:no-such-user")

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "User not found"}


def test_expired_token(client, buyer):
    token = mint_jwt_token(f"u:{buyer.id}", ttl_minutes=-1)

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
