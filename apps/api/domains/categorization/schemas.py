"""Pydantic schemas for the categorization domain."""

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    """Merchant descriptors to categorize as one batch."""

    descriptors: list[str] = Field(..., min_length=1)


class ClassifyResponse(BaseModel):
    """Descriptor -> category, plus the tier that produced it."""

    categories: dict[str, str]
    uncategorized: list[str] = Field(default_factory=list)
    source: str  # "ai", "rules" or "none"
