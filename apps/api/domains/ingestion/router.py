"""Ingestion router — bank statement upload.

One upload runs the whole engine: header sniffing, row normalization,
batch categorization and per-row commits. Only an undetectable header or an
unreadable file fails the request; everything else degrades.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile
from supabase import Client

from apps.api.core.auth import get_current_user_id, get_user_client
from apps.api.core.config import Settings, get_settings
from apps.api.core.errors import BadRequestError, PayloadTooLargeError, ValidationError
from apps.api.domains.ingestion.schemas import IngestResponse, TransactionOut
from apps.api.domains.categorization.service import get_categorizer
from apps.api.domains.ingestion.service import build_ingestor
from apps.api.domains.transactions.repository import SupabaseTransactionStore
from packages.categorization import Categorizer
from packages.ingestion_engine import HeaderNotFound, UnreadableStatement

router = APIRouter(prefix="/ingest", tags=["ingestion"])
logger = structlog.get_logger()

ALLOWED_EXTENSIONS = (".csv", ".tsv", ".txt", ".xls", ".xlsx", ".xlsm")


@router.post("/statement", response_model=IngestResponse)
async def ingest_statement(
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
    client: Client = Depends(get_user_client),
    user_id: str = Depends(get_current_user_id),
    settings: Settings = Depends(get_settings),
    categorizer: Categorizer = Depends(get_categorizer),
):
    """Accept a spreadsheet statement, categorize and store its transactions."""
    filename = file.filename or ""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise BadRequestError(
            f"Unsupported file type. Accepted: {', '.join(ALLOWED_EXTENSIONS)}"
        )

    limit = settings.MAX_UPLOAD_BYTES
    too_large = f"File too large (max {limit // (1024 * 1024)}MB)"
    # Multipart parsing already knows the size; reject before buffering
    if file.size is not None and file.size > limit:
        raise PayloadTooLargeError(too_large)
    contents = await file.read()
    if len(contents) > limit:
        raise PayloadTooLargeError(too_large)

    ingestor = build_ingestor(settings, SupabaseTransactionStore(client), categorizer)
    try:
        result = await ingestor.ingest(contents, user_id, password=password)
    except HeaderNotFound as e:
        logger.warning(
            "header_not_found", filename=filename, best_score=e.best_score
        )
        raise ValidationError(
            "Could not detect columns. Ensure the file has Date, Description "
            "and Amount (or Debit/Credit) columns."
        )
    except UnreadableStatement as e:
        logger.warning("statement_unreadable", filename=filename, error=str(e))
        raise BadRequestError(f"Failed to read file: {e}")

    logger.info(
        "ingest_complete",
        filename=filename,
        count=result.count,
        skipped=result.skipped,
        failed_commits=result.failed_commits,
        categorized_by=result.categorization_source,
    )
    return IngestResponse(
        transactions=[TransactionOut.from_transaction(tx) for tx in result.transactions],
        count=result.count,
        skipped=result.skipped,
        failed_commits=result.failed_commits,
        categorization_source=result.categorization_source,
    )
