"""
Two-tier batch categorizer.

Tier 1 sends every distinct expense descriptor of an ingestion batch to the
text-generation service in a single prompt. Tier 2 is the regex rule table,
used for the whole batch whenever tier 1 is skipped or its answer is
rejected. The tiers never merge: an accepted AI answer suppresses the rules
for every descriptor it was asked about.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from packages.ingestion_engine.models import Transaction

from .constants import AI_VOCABULARY, UNCATEGORIZED, Category, canonical_category
from .rules import RuleMatcher
from .text_generation import RecognizedMapping, TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_DESCRIPTORS = 120

SOURCE_AI = "ai"
SOURCE_RULES = "rules"
SOURCE_NONE = "none"


@dataclass(frozen=True)
class CategorizationOutcome:
    transactions: List[Transaction]
    assignments: Dict[str, str]
    source: str


def build_prompt(descriptors: Sequence[str]) -> str:
    buckets = ", ".join(AI_VOCABULARY)
    return (
        f"Categorize these merchant descriptors into buckets: {buckets}.\n"
        "Return strictly JSON mapping descriptor->bucket.\n"
        "Context: Indian consumer payments.\n"
        f"Descriptors: {json.dumps(list(descriptors), ensure_ascii=False)}"
    )


def _apply(batch: Iterable[Transaction], assignments: Dict[str, str]) -> List[Transaction]:
    # Only expense rows still waiting for a label are touched
    out = []
    for tx in batch:
        label = None
        if tx.is_expense and tx.category == UNCATEGORIZED:
            label = assignments.get(tx.description)
        out.append(tx.with_category(label) if label else tx)
    return out


class Categorizer:
    """Assigns categories to a batch of freshly ingested transactions."""

    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        rules: Optional[RuleMatcher] = None,
        max_descriptors: int = DEFAULT_MAX_DESCRIPTORS,
    ):
        self.generator = generator
        self.rules = rules or RuleMatcher()
        self.max_descriptors = max_descriptors

    def rule_assignments(self, descriptors: Iterable[str]) -> Dict[str, str]:
        assignments = {}
        for descriptor in descriptors:
            category = self.rules.predict(descriptor)
            if category:
                assignments[descriptor] = category
        return assignments

    def _clean_ai_mapping(self, mapping: Dict[str, str], asked: Sequence[str]) -> Dict[str, str]:
        asked_set = set(asked)
        cleaned = {}
        for descriptor, label in mapping.items():
            if descriptor not in asked_set:
                continue
            cleaned[descriptor] = canonical_category(label) or Category.OTHER.value
        return cleaned

    async def _ask_ai(self, descriptors: Sequence[str]) -> Optional[Dict[str, str]]:
        if self.generator is None or not descriptors:
            return None
        try:
            result = await self.generator.generate(build_prompt(descriptors))
        except Exception as e:
            logger.warning(f"AI categorization unavailable, using rules: {e!r}")
            return None

        if not isinstance(result, RecognizedMapping):
            logger.warning(
                f"AI categorization returned unparsable output ({len(result.raw_text)} chars), using rules"
            )
            return None
        return self._clean_ai_mapping(result.mapping, descriptors)

    async def categorize_with_source(
        self, descriptors: Iterable[str], batch: Sequence[Transaction]
    ) -> CategorizationOutcome:
        """Categorize ``batch`` and report which tier produced the labels."""
        ordered = list(dict.fromkeys(descriptors))
        if not ordered:
            return CategorizationOutcome(list(batch), {}, SOURCE_NONE)

        sent = ordered[: self.max_descriptors]
        overflow = ordered[self.max_descriptors :]

        ai_mapping = await self._ask_ai(sent)
        if ai_mapping is not None:
            assignments = dict(ai_mapping)
            # Descriptors past the cap were never offered to the AI
            assignments.update(self.rule_assignments(overflow))
            source = SOURCE_AI
        else:
            assignments = self.rule_assignments(ordered)
            source = SOURCE_RULES

        logger.info(f"Categorized {len(assignments)}/{len(ordered)} descriptors via {source}")
        return CategorizationOutcome(_apply(batch, assignments), assignments, source)

    async def categorize(
        self, descriptors: Iterable[str], batch: Sequence[Transaction]
    ) -> List[Transaction]:
        outcome = await self.categorize_with_source(descriptors, batch)
        return outcome.transactions
