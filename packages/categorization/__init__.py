"""
WealthMate Categorization

AI batch categorization with a deterministic regex fallback.
"""

from .categorizer import CategorizationOutcome, Categorizer, build_prompt
from .constants import AI_VOCABULARY, Category
from .rules import RuleMatcher
from .text_generation import (
    CategorizationUnavailable,
    GeminiTextGenerator,
    RecognizedMapping,
    TextGenerator,
    UnrecognizedText,
    normalize_response,
)

__all__ = [
    "CategorizationOutcome",
    "Categorizer",
    "build_prompt",
    "AI_VOCABULARY",
    "Category",
    "RuleMatcher",
    "CategorizationUnavailable",
    "GeminiTextGenerator",
    "RecognizedMapping",
    "TextGenerator",
    "UnrecognizedText",
    "normalize_response",
]
