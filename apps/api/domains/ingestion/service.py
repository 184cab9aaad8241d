"""Ingestion service — wires the statement engine to settings and storage."""

from typing import Optional

from apps.api.core.config import Settings
from packages.categorization import Categorizer
from packages.ingestion_engine import StatementIngestor, TransactionStore


def build_ingestor(
    settings: Settings,
    store: Optional[TransactionStore],
    categorizer: Optional[Categorizer],
) -> StatementIngestor:
    return StatementIngestor(
        store=store,
        categorizer=categorizer,
        scan_rows=settings.HEADER_SCAN_ROWS,
        min_keyword_hits=settings.HEADER_MIN_KEYWORD_HITS,
        dedupe_uploads=settings.DEDUPE_UPLOADS,
    )
