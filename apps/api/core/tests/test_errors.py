"""Tests for RFC 7807 error handling."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from apps.api.core.errors import (
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
    register_error_handlers,
)


class Entry(BaseModel):
    amount: float = Field(..., gt=0)


@pytest.fixture
def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/statement/missing")
    async def missing_transaction():
        raise NotFoundError("Transaction tx-9 not found")

    @app.get("/statement/no-header")
    async def no_header():
        raise ValidationError("Could not detect columns")

    @app.get("/statement/unreadable")
    async def unreadable():
        raise BadRequestError("Failed to read file: Invalid password")

    @app.get("/statement/huge")
    async def huge():
        raise PayloadTooLargeError()

    @app.post("/entries")
    async def add_entry(entry: Entry):
        return {"amount": entry.amount}

    @app.get("/statement/crash")
    async def crash():
        raise RuntimeError("Unexpected crash")

    return TestClient(app, raise_server_exceptions=False)


class TestProblemDetails:
    def test_not_found(self, client):
        response = client.get("/statement/missing")

        assert response.status_code == 404
        assert response.json() == {
            "type": "about:blank",
            "title": "Not Found",
            "status": 404,
            "detail": "Transaction tx-9 not found",
            "instance": "/statement/missing",
        }

    @pytest.mark.parametrize(
        "path,status,title",
        [
            ("/statement/no-header", 422, "Unprocessable Entity"),
            ("/statement/unreadable", 400, "Bad Request"),
            ("/statement/huge", 413, "Payload Too Large"),
        ],
    )
    def test_upload_failures(self, client, path, status, title):
        response = client.get(path)

        assert response.status_code == status
        assert response.json()["title"] == title
        assert response.json()["status"] == status

    def test_request_body_validation(self, client):
        response = client.post("/entries", json={"amount": -5})

        assert response.status_code == 422
        body = response.json()
        assert body["title"] == "Unprocessable Entity"
        assert body["errors"][0]["loc"] == ["body", "amount"]

    def test_unknown_route(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["instance"] == "/nowhere"

    def test_unhandled_error_hides_details(self, client):
        response = client.get("/statement/crash")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred"
