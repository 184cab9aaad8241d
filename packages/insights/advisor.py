"""Spending summary and AI advisory notes.

The advice call goes through the same text-generation collaborator as the
categorizer. It is plain text rather than a mapping, so an
``UnrecognizedText`` result is the expected success case here.
"""

import json
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from packages.categorization.text_generation import RecognizedMapping, TextGenerator
from packages.ingestion_engine.models import Transaction

logger = logging.getLogger(__name__)

FALLBACK_ADVICE = (
    "• Reduce food delivery by 20%\n"
    "• Pause one subscription this month\n"
    "• Move ₹500/week to a dedicated savings bucket"
)


@dataclass
class SpendingSummary:
    total_income: float = 0.0
    total_expense: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def net(self) -> float:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class Advice:
    text: str
    provider: str  # "ai" or "fallback"


def summarize(transactions: Iterable[Transaction]) -> SpendingSummary:
    """Total income/expense and expense totals per category."""
    summary = SpendingSummary()
    breakdown: Dict[str, float] = defaultdict(float)
    for tx in transactions:
        if tx.is_expense:
            summary.total_expense += tx.amount
            breakdown[tx.category] += tx.amount
        else:
            summary.total_income += tx.amount
    summary.breakdown = dict(sorted(breakdown.items(), key=lambda kv: kv[1], reverse=True))
    return summary


def build_advice_prompt(summary: SpendingSummary, client_name: Optional[str] = None) -> str:
    breakdown = ", ".join(f"{k}: ₹{round(v)}" for k, v in summary.breakdown.items())
    return (
        "You are an institutional finance advisor. "
        f"Client's profile: {client_name or 'Client'}.\n"
        f"Total income: ₹{round(summary.total_income)}. "
        f"Total expense: ₹{round(summary.total_expense)}.\n"
        f"Spending breakdown: {breakdown or 'none'}\n"
        "Task:\n"
        "1) If expenses exceed income: recommend two categories to cut this month "
        "and by how much (₹).\n"
        "2) If income > expenses: recommend where to invest a surplus.\n"
        "Return plain text under 80 words with 3 bullets starting with •."
    )


async def advise(
    summary: SpendingSummary,
    generator: Optional[TextGenerator],
    client_name: Optional[str] = None,
) -> Advice:
    """Ask the text-generation service for advice; never fails."""
    if generator is None:
        return Advice(text=FALLBACK_ADVICE, provider="fallback")

    try:
        result = await generator.generate(build_advice_prompt(summary, client_name))
    except Exception as e:
        logger.warning(f"Advisory generation unavailable: {e!r}")
        return Advice(text=FALLBACK_ADVICE, provider="fallback")

    if isinstance(result, RecognizedMapping):
        text = json.dumps(result.mapping, ensure_ascii=False)
    else:
        text = result.raw_text.strip()

    if not text:
        return Advice(text=FALLBACK_ADVICE, provider="fallback")
    return Advice(text=text, provider="ai")
