import re
from typing import Optional, Pattern, Sequence, Tuple

from .constants import Category

# Evaluated top to bottom; the first matching pattern decides the category
DEFAULT_RULES: Tuple[Tuple[str, str], ...] = (
    (r"swiggy|zomato|dominos|pizza|restaurant|cafe|coffee|bar", Category.FOOD.value),
    (r"uber|ola|taxi|cab|auto|fuel|petrol|diesel", Category.TRANSPORT.value),
    (r"rent|landlord|lease|apartment", Category.HOUSING.value),
    (r"electric|water|gas|bill(s)?", Category.UTILITIES.value),
    (r"clinic|hospital|pharmacy|doctor|medicines", Category.HEALTH.value),
    (r"netflix|prime|spotify|hotstar|subscription", Category.ENTERTAINMENT.value),
    (r"mutual fund|sip|investment|stock|dividend|fd|rd", Category.INVESTMENT.value),
)


class RuleMatcher:
    """Deterministic, always-available categorizer built from regex rules."""

    def __init__(self, rules: Sequence[Tuple[str, str]] = DEFAULT_RULES):
        self.rules: Tuple[Tuple[Pattern[str], str], ...] = tuple(
            (re.compile(pattern, re.IGNORECASE), category) for pattern, category in rules
        )

    def predict(self, text: str) -> Optional[str]:
        """
        Return the category of the first rule matching ``text``, else None.
        """
        if not text:
            return None

        for pattern, category in self.rules:
            if pattern.search(text):
                return category

        return None
