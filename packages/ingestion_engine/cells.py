"""
Cell parsing for spreadsheet statements.

Both parsers are lossy by policy: a bad amount becomes 0 and a bad date
becomes today, so one malformed cell never blocks a whole import.
"""

import math
import numbers
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pandas as pd

# Spreadsheet day zero (accounts for the 1900 leap-year bug)
SERIAL_EPOCH = date(1899, 12, 30)

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def parse_amount(cell: Any) -> float:
    """Parse an amount cell, returning 0.0 for anything unusable."""
    if is_blank(cell):
        return 0.0

    if _is_number(cell):
        return cell

    text = str(cell).replace(",", "")
    text = _NON_NUMERIC.sub("", text)
    try:
        return float(text)
    except ValueError:
        return 0.0


def _today() -> date:
    return date.today()


def parse_date(cell: Any, today: Optional[date] = None) -> str:
    """Parse a date cell into ``YYYY-MM-DD``.

    Numbers are spreadsheet serials counted in whole days from 1899-12-30.
    Strings go through pandas' general parser (day-first). Anything else,
    or a failed parse, yields today's date.
    """
    fallback = today or _today()

    if is_blank(cell):
        return fallback.isoformat()

    if isinstance(cell, datetime):
        return cell.date().isoformat()
    if isinstance(cell, date):
        return cell.isoformat()

    if _is_number(cell):
        try:
            return (SERIAL_EPOCH + timedelta(days=int(cell))).isoformat()
        except (OverflowError, ValueError):
            return fallback.isoformat()

    try:
        parsed = pd.to_datetime(str(cell).strip(), dayfirst=True)
    except (ValueError, TypeError, OverflowError):
        return fallback.isoformat()

    if pd.isna(parsed):
        return fallback.isoformat()
    return parsed.date().isoformat()
