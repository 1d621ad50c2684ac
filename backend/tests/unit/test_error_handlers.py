"""
Unit tests for the error envelope produced by the exception handlers.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.core.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    PlanLimitError,
    ValidationError,
    register_exception_handlers,
)
from app.core.middleware.request_id import RequestIdMiddleware


class Payload(BaseModel):
    count: int


@pytest.fixture
def client():
    """A throwaway app that raises each error type on demand."""
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    errors = {
        "validation": ValidationError("Please add a title"),
        "auth": AuthenticationError("Not authorized to access this route"),
        "limit": PlanLimitError("Model limit reached for your plan. Please upgrade."),
        "missing": NotFoundError("Document not found"),
        "conflict": ConflictError("Company with this ID already exists"),
        "internal": InternalError("Failed to update company context"),
    }

    @app.get("/raise/{kind}")
    async def raise_error(kind: str):
        raise errors[kind]

    @app.get("/http")
    async def raise_http():
        raise HTTPException(status_code=418, detail="short and stout")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    @app.post("/payload")
    async def payload(body: Payload):
        return body

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelope:

    @pytest.mark.parametrize(
        "kind, status_code, message",
        [
            ("validation", 400, "Please add a title"),
            ("auth", 401, "Not authorized to access this route"),
            ("limit", 403, "Model limit reached for your plan. Please upgrade."),
            ("missing", 404, "Document not found"),
            ("conflict", 400, "Company with this ID already exists"),
            ("internal", 500, "Failed to update company context"),
        ],
    )
    def test_app_errors(self, client, kind, status_code, message):
        response = client.get(f"/raise/{kind}")

        assert response.status_code == status_code
        assert response.json() == {"success": False, "error": message}
        assert response.headers["x-request-id"]

    def test_http_exception(self, client):
        response = client.get("/http")

        assert response.status_code == 418
        assert response.json() == {"success": False, "error": "short and stout"}

    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_request_validation_is_400(self, client):
        response = client.post("/payload", json={"count": "many"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("count:")

    def test_unhandled_error_hides_details(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Server error"}
        assert "hunter2" not in response.text

    def test_request_id_is_echoed(self, client):
        response = client.get("/raise/missing", headers={"x-request-id": "req-123"})

        assert response.headers["x-request-id"] == "req-123"
