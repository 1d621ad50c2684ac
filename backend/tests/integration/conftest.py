"""
API integration test configuration.

Each test gets its own SQLite file and a TestClient running the full
application (middleware, exception handlers, background runner).
"""

import itertools
from typing import Callable, Dict, Tuple

import pytest
from fastapi.testclient import TestClient

from app.db.session import create_all, init_engine
from app.main import app

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"

_counter = itertools.count()


@pytest.fixture
def client(database_url):
    """Create test client with a fresh database."""
    init_engine(database_url)
    with TestClient(app) as test_client:
        test_client.portal.call(create_all)
        yield test_client


@pytest.fixture
def drain(client) -> Callable[[], None]:
    """Block until every background job scheduled so far has finished."""
    def _drain():
        client.portal.call(client.app.state.runner.drain)
    return _drain


@pytest.fixture
def register(client) -> Callable[..., Tuple[Dict[str, str], Dict]]:
    """
    Register an account and return (auth headers, user data).

    Business accounts get a generated business name unless one is given.
    """
    def _register(name: str = "Test User", user_type: str = "individual", **extra):
        email = extra.pop("email", None) or f"user{next(_counter)}@example.com"
        payload = {
            "name": name,
            "email": email,
            "password": extra.pop("password", "secret123"),
            "userType": user_type,
        }
        if user_type == "business":
            payload["businessName"] = extra.pop("businessName", f"{name} Ltd")
        payload.update(extra)

        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["data"]
    return _register


@pytest.fixture
def upload(client) -> Callable[..., Dict]:
    """Upload a small PDF for the given headers and return the document."""
    def _upload(headers: Dict[str, str], title: str = "Handbook", content: bytes = PDF_BYTES):
        response = client.post(
            "/api/documents",
            headers=headers,
            files={"document": ("handbook.pdf", content, "application/pdf")},
            data={"title": title},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _upload
