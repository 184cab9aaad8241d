"""
Row normalization: one sheet row plus a column mapping becomes a Transaction.

Side resolution trusts explicit debit/credit columns over a single signed
amount column. Rows that carry no usable amount are skipped, not rejected.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence, Tuple

from .cells import is_blank, parse_amount, parse_date
from .models import (
    INCOME_CATEGORY,
    UNCATEGORIZED,
    ColumnMapping,
    Transaction,
    TransactionKind,
)

UNKNOWN_DESCRIPTION = "Unknown"

# Skip reasons, used as diagnostic counter keys
SKIP_EMPTY = "empty"
SKIP_NO_AMOUNT = "no_amount"
SKIP_ZERO_AMOUNT = "zero_amount"
SKIP_DUPLICATE = "duplicate"


@dataclass(frozen=True)
class RowOutcome:
    """Result of normalizing a row: a transaction, or the reason it was skipped."""

    transaction: Optional[Transaction] = None
    skip_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.transaction is None


def _cell(row: Sequence[Any], idx: Optional[int]) -> Any:
    if idx is None or idx < 0 or idx >= len(row):
        return None
    return row[idx]


def _text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_empty_row(row: Optional[Sequence[Any]]) -> bool:
    return not row or all(is_blank(cell) for cell in row)


def resolve_amount(
    row: Sequence[Any], mapping: ColumnMapping
) -> Optional[Tuple[float, TransactionKind]]:
    """Return ``(magnitude, kind)`` or ``None`` when no amount source applies."""
    if mapping.debit is not None:
        debit = parse_amount(_cell(row, mapping.debit))
        if debit != 0:
            return abs(debit), TransactionKind.EXPENSE

    if mapping.credit is not None:
        credit = parse_amount(_cell(row, mapping.credit))
        if credit != 0:
            return abs(credit), TransactionKind.INCOME

    if mapping.amount is not None:
        value = parse_amount(_cell(row, mapping.amount))
        if value < 0:
            return abs(value), TransactionKind.EXPENSE
        return value, TransactionKind.INCOME

    return None


def resolve_description(row: Sequence[Any], mapping: ColumnMapping) -> str:
    if mapping.description is not None:
        candidates = [mapping.description]
    else:
        candidates = [1, 0]

    for idx in candidates:
        value = _cell(row, idx)
        if not is_blank(value):
            return _text(value)
    return UNKNOWN_DESCRIPTION


def normalize_row(
    row: Optional[Sequence[Any]],
    mapping: ColumnMapping,
    owner_id: str,
    today: Optional[date] = None,
) -> RowOutcome:
    """Convert a sheet row into a transaction or a skip outcome."""
    if is_empty_row(row):
        return RowOutcome(skip_reason=SKIP_EMPTY)

    resolved = resolve_amount(row, mapping)
    if resolved is None:
        return RowOutcome(skip_reason=SKIP_NO_AMOUNT)

    magnitude, kind = resolved
    if magnitude == 0:
        return RowOutcome(skip_reason=SKIP_ZERO_AMOUNT)

    category = INCOME_CATEGORY if kind is TransactionKind.INCOME else UNCATEGORIZED

    return RowOutcome(
        transaction=Transaction(
            owner_id=owner_id,
            description=resolve_description(row, mapping),
            amount=float(magnitude),
            date=parse_date(_cell(row, mapping.date), today=today),
            kind=kind,
            category=category,
        )
    )
