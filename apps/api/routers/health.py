"""Health check router — liveness + readiness.

Readiness reports configuration only; it never calls Supabase or Gemini,
so a slow upstream cannot make the probe hang.
"""

import structlog
from fastapi import APIRouter, Depends

from apps.api.core.config import Settings, get_settings

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health")
async def health_liveness():
    """Liveness probe — returns 200 if the API process is running."""
    return {"status": "healthy", "service": "api"}


@router.get("/health/ready")
async def health_readiness(settings: Settings = Depends(get_settings)):
    """Readiness probe — reports which tiers are configured."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {
            "api": "up",
            "store": "configured" if settings.SUPABASE_URL else "missing",
            "ai_categorization": "enabled" if settings.ai_enabled else "rules_only",
        },
    }
