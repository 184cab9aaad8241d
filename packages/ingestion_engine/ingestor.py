"""
Statement Ingestor - turns an uploaded spreadsheet into stored transactions.

Pipeline (strictly sequential, one await at a time):
    decode first sheet -> detect header -> map columns -> normalize rows
    -> categorize batch -> commit each row to the transaction store

Header detection failure aborts before anything is committed. Everything
after that is best-effort: bad cells degrade, unusable rows are skipped and
a failed commit only drops its own row.
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from .column_mapper import map_columns
from .excel_parser import load_sheet_rows
from .fingerprint import transaction_fingerprint
from .header_detector import (
    DEFAULT_MIN_KEYWORD_HITS,
    DEFAULT_SCAN_ROWS,
    HEADER_KEYWORDS,
    detect_header_row,
)
from .models import ColumnMapping, Transaction
from .normalizer import SKIP_DUPLICATE, normalize_row
from .store import TransactionStore

logger = logging.getLogger(__name__)


def _distinct_expense_descriptors(transactions: Iterable[Transaction]) -> List[str]:
    return list(dict.fromkeys(tx.description for tx in transactions if tx.is_expense))


class BatchCategorizer(Protocol):
    async def categorize_with_source(self, descriptors: Iterable[str], batch: Sequence[Transaction]) -> Any:
        ...


@dataclass
class StatementBatch:
    """Parsed (not yet stored) result of one statement."""

    transactions: List[Transaction]
    distinct_expense_descriptors: List[str]
    header_row: int
    mapping: ColumnMapping
    skipped: Dict[str, int] = field(default_factory=dict)


@dataclass
class IngestionResult:
    transactions: List[Transaction]
    distinct_expense_descriptors: List[str]
    skipped: Dict[str, int] = field(default_factory=dict)
    failed_commits: int = 0
    categorization_source: str = "none"

    @property
    def count(self) -> int:
        return len(self.transactions)


class StatementIngestor:
    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        categorizer: Optional[BatchCategorizer] = None,
        keywords: Sequence[str] = HEADER_KEYWORDS,
        scan_rows: int = DEFAULT_SCAN_ROWS,
        min_keyword_hits: int = DEFAULT_MIN_KEYWORD_HITS,
        dedupe_uploads: bool = False,
    ):
        """
        Args:
            store: Transaction store rows are committed to (None = parse only)
            categorizer: Batch categorizer run before commit (None = skip)
            keywords: Header keywords used to score candidate header rows
            scan_rows: How many leading rows may hold the header
            min_keyword_hits: Minimum header score; below it HeaderNotFound is raised
            dedupe_uploads: Skip rows whose fingerprint is already stored for the owner
        """
        self.store = store
        self.categorizer = categorizer
        self.keywords = tuple(keywords)
        self.scan_rows = scan_rows
        self.min_keyword_hits = min_keyword_hits
        self.dedupe_uploads = dedupe_uploads

    def parse_rows(
        self, rows: List[Sequence[Any]], owner_id: str, today: Optional[date] = None
    ) -> StatementBatch:
        """Run header detection and row normalization over a decoded grid."""
        header_idx = detect_header_row(
            rows,
            self.keywords,
            scan_rows=self.scan_rows,
            min_keyword_hits=self.min_keyword_hits,
        )
        mapping = map_columns(rows[header_idx])
        logger.info(f"Header at row {header_idx}, mapping {mapping}")

        transactions: List[Transaction] = []
        descriptors: Dict[str, None] = {}
        skipped: Counter = Counter()

        for row in rows[header_idx + 1 :]:
            outcome = normalize_row(row, mapping, owner_id, today=today)
            if outcome.skipped:
                skipped[outcome.skip_reason] += 1
                continue
            tx = outcome.transaction
            transactions.append(tx)
            if tx.is_expense:
                descriptors.setdefault(tx.description, None)

        if skipped:
            logger.debug(f"Skipped rows: {dict(skipped)}")

        return StatementBatch(
            transactions=transactions,
            distinct_expense_descriptors=list(descriptors),
            header_row=header_idx,
            mapping=mapping,
            skipped=dict(skipped),
        )

    def parse(
        self,
        file_content: bytes,
        owner_id: str,
        password: Optional[str] = None,
        today: Optional[date] = None,
    ) -> StatementBatch:
        rows = load_sheet_rows(file_content, password=password)
        logger.info(f"Read {len(rows)} rows")
        return self.parse_rows(rows, owner_id, today=today)

    async def _drop_stored_duplicates(
        self, owner_id: str, transactions: List[Transaction]
    ) -> List[Transaction]:
        existing = await self.store.list(owner_id)
        seen = {transaction_fingerprint(tx) for tx in existing}
        return [tx for tx in transactions if transaction_fingerprint(tx) not in seen]

    async def _commit(self, transactions: List[Transaction]) -> List[Transaction]:
        committed = []
        for tx in transactions:
            try:
                committed.append(await self.store.insert(tx))
            except Exception as e:
                logger.warning(f"Failed to commit transaction {tx.id} ({tx.description!r}): {e!r}")
        return committed

    async def ingest(
        self,
        file_content: bytes,
        owner_id: str,
        password: Optional[str] = None,
        today: Optional[date] = None,
    ) -> IngestionResult:
        """Parse, categorize and commit one statement for ``owner_id``.

        Raises:
            HeaderNotFound: no header row met the keyword threshold
            UnreadableStatement: the file could not be decoded
        """
        # Workbook decoding is CPU-bound; keep it off the event loop
        batch = await asyncio.to_thread(
            self.parse, file_content, owner_id, password=password, today=today
        )
        transactions = batch.transactions
        skipped = dict(batch.skipped)

        if self.dedupe_uploads and self.store is not None and transactions:
            kept = await self._drop_stored_duplicates(owner_id, transactions)
            if len(kept) != len(transactions):
                skipped[SKIP_DUPLICATE] = len(transactions) - len(kept)
            transactions = kept

        source = "none"
        if self.categorizer is not None:
            descriptors = _distinct_expense_descriptors(transactions)
            outcome = await self.categorizer.categorize_with_source(descriptors, transactions)
            transactions = outcome.transactions
            source = outcome.source

        failed = 0
        if self.store is not None:
            committed = await self._commit(transactions)
            failed = len(transactions) - len(committed)
            transactions = committed

        logger.info(
            f"Ingested {len(transactions)} transactions for {owner_id} "
            f"(skipped={skipped}, failed_commits={failed}, categorized_by={source})"
        )
        return IngestionResult(
            transactions=transactions,
            distinct_expense_descriptors=_distinct_expense_descriptors(transactions),
            skipped=skipped,
            failed_commits=failed,
            categorization_source=source,
        )
