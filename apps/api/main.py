"""WealthMate API — FastAPI entry point.

Routes are served from domain modules under apps/api/domains/; only the
health probes live in apps/api/routers/.
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.core.config import get_settings
from apps.api.core.errors import register_error_handlers
from apps.api.core.logging import setup_logging

from apps.api.domains.ingestion.router import router as ingestion_router
from apps.api.domains.transactions.router import router as transactions_router
from apps.api.domains.categorization.router import router as categorization_router
from apps.api.domains.insights.router import router as insights_router
from apps.api.routers import health

logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup/shutdown hooks."""
    setup_logging(
        log_level=settings.log_level,
        json_output=(settings.ENVIRONMENT == "production"),
    )
    logger.info("app_starting", version=settings.APP_VERSION, ai_enabled=settings.ai_enabled)
    yield
    logger.info("app_stopping")


app = FastAPI(
    title="WealthMate API",
    description="Bank statement ingestion, categorization and spending insights.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ingestion_router, prefix="/api/v1")
app.include_router(transactions_router, prefix="/api/v1")
app.include_router(categorization_router, prefix="/api/v1")
app.include_router(insights_router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
