"""API fixtures: a TestClient wired to the per-test in-memory database."""

import pytest
from fastapi.testclient import TestClient

from app import app
from core.db import get_session_factory
from utils.auth import mint_jwt_token


@pytest.fixture
def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(buyer):
    return {"Authorization": f"Bearer {mint_jwt_token(f'u:{buyer.id}')}"}
