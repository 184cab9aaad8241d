"""Tests for the insights advice endpoint."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.core.auth import get_user_client
from apps.api.domains.categorization.service import get_text_generator
from apps.api.domains.insights.router import router
from apps.api.domains.transactions.router import get_transaction_store
from packages.categorization import UnrecognizedText
from packages.ingestion_engine.models import Transaction, TransactionKind
from packages.insights.advisor import FALLBACK_ADVICE

OWNER = "test-user-id"


class ListOnlyStore:
    def __init__(self, rows):
        self.rows = rows

    async def list(self, owner_id):
        return [tx for tx in self.rows if tx.owner_id == owner_id]


class FakeGenerator:
    def __init__(self, text):
        self.text = text

    async def generate(self, prompt):
        return UnrecognizedText(self.text)


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")

    mock_client = MagicMock()
    mock_user = MagicMock()
    mock_user.id = OWNER
    mock_client.auth.get_user.return_value = MagicMock(user=mock_user)

    store = ListOnlyStore(
        [
            Transaction(OWNER, "SALARY", 40000.0, "2026-01-01", TransactionKind.INCOME, "Income"),
            Transaction(OWNER, "RENT", 15000.0, "2026-01-02", TransactionKind.EXPENSE, "Housing"),
            Transaction(OWNER, "SWIGGY", 3000.0, "2026-01-03", TransactionKind.EXPENSE, "Food"),
        ]
    )
    app.dependency_overrides[get_user_client] = lambda: mock_client
    app.dependency_overrides[get_transaction_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: None
    yield app
    app.dependency_overrides.clear()


def test_advice_with_fallback(app):
    response = TestClient(app).get("/api/v1/insights/advice")

    assert response.status_code == 200
    data = response.json()
    assert data["total_income"] == 40000.0
    assert data["total_expense"] == 18000.0
    assert data["net"] == 22000.0
    assert data["breakdown"] == {"Housing": 15000.0, "Food": 3000.0}
    assert data["provider"] == "fallback"
    assert data["advice"] == FALLBACK_ADVICE


def test_advice_from_generator(app):
    app.dependency_overrides[get_text_generator] = lambda: FakeGenerator("• Invest ₹10000 in a SIP")

    data = TestClient(app).get("/api/v1/insights/advice", params={"client_name": "Asha"}).json()

    assert data["provider"] == "ai"
    assert data["advice"] == "• Invest ₹10000 in a SIP"
