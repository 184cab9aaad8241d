"""Transaction records produced by statement ingestion."""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional


UNCATEGORIZED = "Uncategorized"
INCOME_CATEGORY = "Income"


class TransactionKind(str, Enum):
    """Side of a transaction relative to the account owner."""

    EXPENSE = "expense"
    INCOME = "income"


def new_transaction_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Transaction:
    """A normalized financial transaction.

    ``amount`` is always a positive magnitude; the side lives in ``kind``.
    Only ``category`` may change after creation, through :meth:`with_category`.
    """

    owner_id: str
    description: str
    amount: float
    date: str  # YYYY-MM-DD
    kind: TransactionKind
    category: str = UNCATEGORIZED
    id: str = field(default_factory=new_transaction_id)

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE

    def with_category(self, category: str) -> "Transaction":
        return replace(self, category=category)

    def to_row(self) -> Dict[str, Any]:
        """Serialize to the ``transactions`` table shape."""
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
            "type": self.kind.value,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Transaction":
        return cls(
            id=str(row["id"]),
            owner_id=str(row["user_id"]),
            description=str(row.get("description") or ""),
            amount=float(row["amount"]),
            category=str(row.get("category") or UNCATEGORIZED),
            date=str(row["date"])[:10],
            kind=TransactionKind(row["type"]),
        )


@dataclass(frozen=True)
class ColumnMapping:
    """Zero-based column index per semantic role; ``None`` when absent."""

    date: Optional[int] = None
    description: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None
    amount: Optional[int] = None

    def has_amount_source(self) -> bool:
        return any(i is not None for i in (self.debit, self.credit, self.amount))
