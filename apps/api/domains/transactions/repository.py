"""Supabase-backed transaction store.

Implements the ingestion engine's ``TransactionStore`` protocol over the
``transactions`` table. The supabase client is synchronous, so each query
runs in a worker thread and is awaited; calls stay strictly sequential.
"""

import asyncio
from typing import List

import structlog
from supabase import Client

from apps.api.core.errors import NotFoundError
from packages.ingestion_engine.models import Transaction

logger = structlog.get_logger()

TABLE = "transactions"


class SupabaseTransactionStore:
    def __init__(self, client: Client, table: str = TABLE):
        self.client = client
        self.table = table

    async def _execute(self, query):
        return await asyncio.to_thread(query.execute)

    async def insert(self, transaction: Transaction) -> Transaction:
        response = await self._execute(
            self.client.table(self.table).insert(transaction.to_row())
        )
        if not response.data:
            # Insert without RETURNING (e.g. restrictive RLS select policy)
            return transaction
        return Transaction.from_row(response.data[0])

    async def list(self, owner_id: str) -> List[Transaction]:
        response = await self._execute(
            self.client.table(self.table)
            .select("*")
            .eq("user_id", owner_id)
            .order("date", desc=True)
        )
        return [Transaction.from_row(row) for row in response.data or []]

    async def update_category(self, transaction_id: str, category: str) -> Transaction:
        response = await self._execute(
            self.client.table(self.table)
            .update({"category": category})
            .eq("id", transaction_id)
        )
        if not response.data:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return Transaction.from_row(response.data[0])

    async def delete(self, transaction_id: str) -> None:
        await self._execute(self.client.table(self.table).delete().eq("id", transaction_id))

    async def purge_all(self, owner_id: str) -> None:
        await self._execute(self.client.table(self.table).delete().eq("user_id", owner_id))
        logger.info("transactions_purged", owner_id=owner_id)
