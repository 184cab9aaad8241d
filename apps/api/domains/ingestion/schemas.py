"""Pydantic schemas for the ingestion domain."""

from pydantic import BaseModel, Field

from packages.ingestion_engine import Transaction


class TransactionOut(BaseModel):
    """A stored transaction as returned to the client."""

    id: str
    date: str
    amount: float
    description: str
    category: str = "Uncategorized"
    type: str  # "expense" or "income"

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionOut":
        return cls(
            id=tx.id,
            date=tx.date,
            amount=tx.amount,
            description=tx.description,
            category=tx.category,
            type=tx.kind.value,
        )


class IngestResponse(BaseModel):
    """Response from statement ingestion."""

    transactions: list[TransactionOut]
    count: int
    skipped: dict[str, int] = Field(default_factory=dict)
    failed_commits: int = 0
    categorization_source: str = "none"
