"""Categorization service — categorizer construction and caching.

The categorizer holds an httpx-backed text generator, so it is built once
per process and reused instead of per request.
"""

import threading
from typing import Optional

import structlog

from apps.api.core.config import Settings, get_settings
from packages.categorization import Categorizer, GeminiTextGenerator, TextGenerator

logger = structlog.get_logger()

# Module-level singleton (thread-safe init)
_categorizer: Optional[Categorizer] = None
_categorizer_lock = threading.Lock()


def build_text_generator(settings: Settings) -> Optional[TextGenerator]:
    """Gemini client when a key is configured, else None (rules only)."""
    if not settings.ai_enabled:
        return None
    return GeminiTextGenerator(
        api_key=settings.GEMINI_API_KEY,
        api_url=settings.GEMINI_API_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )


def build_categorizer(settings: Settings) -> Categorizer:
    return Categorizer(
        generator=build_text_generator(settings),
        max_descriptors=settings.CATEGORIZER_MAX_DESCRIPTORS,
    )


def get_categorizer() -> Categorizer:
    """Get or create the process-wide categorizer."""
    global _categorizer
    if _categorizer is None:
        with _categorizer_lock:
            if _categorizer is None:  # Double-checked locking
                settings = get_settings()
                _categorizer = build_categorizer(settings)
                logger.info(
                    "categorizer_initialized",
                    ai_enabled=settings.ai_enabled,
                    max_descriptors=settings.CATEGORIZER_MAX_DESCRIPTORS,
                )
    return _categorizer


def get_text_generator() -> Optional[TextGenerator]:
    """The shared categorizer's text generator, reused by the advisor."""
    return get_categorizer().generator
