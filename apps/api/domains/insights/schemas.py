"""Pydantic schemas for the insights domain."""

from pydantic import BaseModel


class AdviceResponse(BaseModel):
    total_income: float
    total_expense: float
    net: float
    breakdown: dict[str, float]
    advice: str
    provider: str  # "ai" or "fallback"
