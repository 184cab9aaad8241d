"""Categorization router — ad-hoc batch classification of descriptors.

Runs the same two-tier categorizer the ingestion pipeline uses, without
storing anything.
"""

import structlog
from fastapi import APIRouter, Depends

from apps.api.core.auth import get_current_user_id
from apps.api.core.errors import ValidationError
from apps.api.domains.categorization.schemas import ClassifyRequest, ClassifyResponse
from apps.api.domains.categorization.service import get_categorizer
from packages.categorization import Categorizer

router = APIRouter(prefix="/categorization", tags=["categorization"])
logger = structlog.get_logger()


@router.post("/classify", response_model=ClassifyResponse)
async def classify_descriptors(
    request: ClassifyRequest,
    user_id: str = Depends(get_current_user_id),
    categorizer: Categorizer = Depends(get_categorizer),
):
    descriptors = list(dict.fromkeys(d.strip() for d in request.descriptors if d.strip()))
    if not descriptors:
        raise ValidationError("No descriptors provided")

    outcome = await categorizer.categorize_with_source(descriptors, [])
    logger.info("classify_complete", count=len(descriptors), source=outcome.source)
    return ClassifyResponse(
        categories=outcome.assignments,
        uncategorized=[d for d in descriptors if d not in outcome.assignments],
        source=outcome.source,
    )
