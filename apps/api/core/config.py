"""Centralized application configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance, including the ingestion
and categorization tunables, so none of them are hidden constants.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(..., description="Supabase anon/public key")
    SUPABASE_SERVICE_KEY: str = Field(
        default="",
        description="Supabase service-role key (for the import CLI)",
    )

    # Text generation (Gemini)
    GEMINI_API_KEY: str = Field(
        default="",
        description="Gemini API key; empty disables the AI tier",
    )
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1/models/gemini-pro:generateContent",
        description="Gemini generateContent endpoint",
    )
    AI_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Transport timeout for the single categorization call",
    )

    # Ingestion / categorization
    CATEGORIZER_MAX_DESCRIPTORS: int = Field(
        default=120,
        description="Max distinct descriptors sent to the AI per batch",
    )
    HEADER_SCAN_ROWS: int = Field(default=12, description="Rows scanned for the header")
    HEADER_MIN_KEYWORD_HITS: int = Field(
        default=2,
        description="Minimum header keyword hits before giving up",
    )
    DEDUPE_UPLOADS: bool = Field(
        default=False,
        description="Skip rows already stored for the owner (date, description, amount, kind)",
    )
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, description="Upload size limit")

    # CORS
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Comma-separated allowed origins for CORS",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # App
    APP_VERSION: str = Field(default="0.1.0", description="Application version")

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def ai_enabled(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings — allows test override."""
    return Settings()

