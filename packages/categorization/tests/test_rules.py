"""Tests for the regex fallback rules."""

import pytest

from packages.categorization.constants import canonical_category
from packages.categorization.rules import RuleMatcher


@pytest.fixture
def matcher():
    return RuleMatcher()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("UPI-SWIGGY-BLR", "Food"),
        ("Zomato Order 8812", "Food"),
        ("UBER TRIP", "Transport"),
        ("HP PETROL PUMP", "Transport"),
        ("RENT TRANSFER MAY", "Housing"),
        ("BESCOM ELECTRICITY", "Utilities"),
        ("APOLLO PHARMACY", "Health"),
        ("NETFLIX.COM", "Entertainment"),
        ("HDFC MUTUAL FUND SIP", "Investment"),
    ],
)
def test_rule_categories(matcher, text, expected):
    assert matcher.predict(text) == expected


def test_case_insensitive(matcher):
    assert matcher.predict("spotify premium") == "Entertainment"


def test_first_matching_rule_wins(matcher):
    """Food is checked before Transport."""
    assert matcher.predict("UBER EATS CAFE") == "Food"


def test_no_match(matcher):
    assert matcher.predict("NEFT TO A KUMAR") is None
    assert matcher.predict("") is None


def test_custom_rules():
    matcher = RuleMatcher(rules=((r"chai", "Food"),))
    assert matcher.predict("CHAI POINT") == "Food"
    assert matcher.predict("SWIGGY") is None


def test_canonical_category():
    assert canonical_category(" food ") == "Food"
    assert canonical_category("INVESTMENT") == "Investment"
    assert canonical_category("Groceries") is None
