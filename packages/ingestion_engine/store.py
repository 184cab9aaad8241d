"""Transaction store interface consumed by the ingestion engine.

The engine never keeps persistence state itself; callers inject an
implementation (Supabase in the API, in-memory fakes in tests).
"""

from typing import List, Protocol

from .models import Transaction


class TransactionStore(Protocol):
    async def insert(self, transaction: Transaction) -> Transaction:
        """Persist one transaction and return the committed record."""
        ...

    async def list(self, owner_id: str) -> List[Transaction]:
        ...

    async def update_category(self, transaction_id: str, category: str) -> Transaction:
        ...

    async def delete(self, transaction_id: str) -> None:
        ...

    async def purge_all(self, owner_id: str) -> None:
        ...
