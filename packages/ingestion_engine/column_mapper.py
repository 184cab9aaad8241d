import re
from typing import Any, Dict, Optional, Sequence

from .cells import is_blank
from .models import ColumnMapping

# Priority order matters: a column belongs to the first role that matches it
ROLE_PATTERNS = (
    ("date", re.compile(r"date")),
    ("description", re.compile(r"description|narration|particulars|remark|merchant")),
    ("debit", re.compile(r"debit|withdrawal|dr")),
    ("credit", re.compile(r"credit|deposit|cr")),
    ("amount", re.compile(r"amount|txn amount|value")),
)


def classify_header(label: str) -> Optional[str]:
    """Return the semantic role for a single header label, if any."""
    label = label.strip().lower()
    if not label:
        return None
    for role, pattern in ROLE_PATTERNS:
        if pattern.search(label):
            return role
    return None


def map_columns(header_row: Sequence[Any]) -> ColumnMapping:
    """Map header labels to semantic roles.

    Each role keeps the first column claimed for it. A column claimed by a
    higher-priority role is not offered to lower ones, so "Description"
    never doubles as a credit column because it contains "cr".
    """
    found: Dict[str, int] = {}
    for idx, cell in enumerate(header_row):
        if is_blank(cell):
            continue
        role = classify_header(str(cell))
        if role is not None and role not in found:
            found[role] = idx
    return ColumnMapping(**found)
