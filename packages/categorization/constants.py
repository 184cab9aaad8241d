"""Category constants for transaction classification.

This module defines the closed vocabulary the AI tier must choose from, plus
the two labels the ingestion engine assigns on its own (``Uncategorized`` and
``Income``). Using constants instead of hardcoded strings keeps the prompt,
the response validation and the fallback rules consistent.
"""

from enum import Enum
from typing import Optional


class Category(str, Enum):
    """Buckets offered to the AI classifier."""

    FOOD = "Food"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    TRANSFER = "Transfer"
    HOUSING = "Housing"
    SALARY = "Salary"
    INVESTMENT = "Investment"
    OTHER = "Other"


UNCATEGORIZED = "Uncategorized"
INCOME = "Income"

AI_VOCABULARY: tuple[str, ...] = tuple(c.value for c in Category)

_BY_LOWER = {label.lower(): label for label in AI_VOCABULARY}


def canonical_category(label: str) -> Optional[str]:
    """Return the vocabulary spelling of ``label`` (case-insensitive), or None."""
    return _BY_LOWER.get(label.strip().lower())
