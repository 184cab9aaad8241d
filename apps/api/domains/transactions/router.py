"""Transactions router — list, manual entry, re-categorize, delete and purge.

Every query runs through the user-scoped Supabase client, so RLS limits
each call to the caller's own rows.
"""

from datetime import date

import structlog
from fastapi import APIRouter, Depends
from supabase import Client

from apps.api.core.auth import get_current_user_id, get_user_client
from apps.api.domains.ingestion.schemas import TransactionOut
from apps.api.domains.transactions.repository import SupabaseTransactionStore
from apps.api.domains.transactions.schemas import CategoryUpdate, ManualTransaction, TransactionList
from packages.ingestion_engine.models import INCOME_CATEGORY, Transaction, TransactionKind

router = APIRouter(prefix="/transactions", tags=["transactions"])
logger = structlog.get_logger()


def get_transaction_store(client: Client = Depends(get_user_client)) -> SupabaseTransactionStore:
    return SupabaseTransactionStore(client)


@router.get("", response_model=TransactionList)
async def list_transactions(
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
):
    """All of the caller's transactions, newest first."""
    transactions = await store.list(user_id)
    return TransactionList(
        transactions=[TransactionOut.from_transaction(tx) for tx in transactions],
        count=len(transactions),
    )


@router.post("", response_model=TransactionOut, status_code=201)
async def add_transaction(
    entry: ManualTransaction,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
):
    """Store a manually entered transaction dated today."""
    tx = Transaction(
        owner_id=user_id,
        description=entry.description,
        amount=entry.amount,
        date=date.today().isoformat(),
        kind=entry.type,
        category=entry.category if entry.type is TransactionKind.EXPENSE else INCOME_CATEGORY,
    )
    stored = await store.insert(tx)
    logger.info("transaction_added", transaction_id=stored.id, type=stored.kind.value)
    return TransactionOut.from_transaction(stored)


@router.patch("/{transaction_id}", response_model=TransactionOut)
async def update_category(
    transaction_id: str,
    update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
):
    tx = await store.update_category(transaction_id, update.category)
    logger.info("transaction_recategorized", transaction_id=transaction_id, category=update.category)
    return TransactionOut.from_transaction(tx)


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
):
    await store.delete(transaction_id)
    logger.info("transaction_deleted", transaction_id=transaction_id)


@router.delete("", status_code=204)
async def purge_transactions(
    user_id: str = Depends(get_current_user_id),
    store: SupabaseTransactionStore = Depends(get_transaction_store),
):
    """Delete every transaction owned by the caller."""
    await store.purge_all(user_id)
