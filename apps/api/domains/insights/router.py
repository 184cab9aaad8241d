"""Insights router — spending summary with an advisory note."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from apps.api.core.auth import get_current_user_id
from apps.api.domains.categorization.service import get_text_generator
from apps.api.domains.insights.schemas import AdviceResponse
from apps.api.domains.transactions.repository import SupabaseTransactionStore
from apps.api.domains.transactions.router import get_transaction_store
from packages.categorization import TextGenerator
from packages.insights import advise, summarize

router = APIRouter(prefix="/insights", tags=["insights"])
logger = structlog.get_logger()


@router.get("/advice", response_model=AdviceResponse)
async def get_advice(
    client_name: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
):
    """Summarize the caller's transactions and ask for advice on them."""
    summary = summarize(await store.list(user_id))
    advice = await advise(summary, generator, client_name)
    logger.info("advice_generated", provider=advice.provider, categories=len(summary.breakdown))
    return AdviceResponse(
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        net=summary.net,
        breakdown=summary.breakdown,
        advice=advice.text,
        provider=advice.provider,
    )
