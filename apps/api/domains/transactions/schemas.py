"""Pydantic schemas for the transactions domain."""

from pydantic import BaseModel, Field, field_validator

from apps.api.domains.ingestion.schemas import TransactionOut
from packages.categorization.constants import INCOME, UNCATEGORIZED, canonical_category
from packages.ingestion_engine.models import TransactionKind

_ENGINE_LABELS = {UNCATEGORIZED.lower(): UNCATEGORIZED, INCOME.lower(): INCOME}


def _known_category(value: str) -> str:
    canonical = canonical_category(value) or _ENGINE_LABELS.get(value.strip().lower())
    if canonical is None:
        raise ValueError(f"Unknown category: {value}")
    return canonical


class CategoryUpdate(BaseModel):
    """Manual re-categorization of one transaction."""

    category: str

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        return _known_category(value)


class ManualTransaction(BaseModel):
    """A transaction typed in by the user instead of imported."""

    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    type: TransactionKind = TransactionKind.EXPENSE
    category: str = UNCATEGORIZED

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Description must not be blank")
        return value

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        return _known_category(value)


class TransactionList(BaseModel):
    transactions: list[TransactionOut]
    count: int
