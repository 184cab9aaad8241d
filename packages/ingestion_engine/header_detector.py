"""Header row detection for statements without a fixed layout.

Bank exports usually start with a preamble (account holder, branch, period)
before the real column labels. Each of the first few rows is scored by how
many known header keywords it contains and the best one wins.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .cells import is_blank

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = (
    "date",
    "description",
    "narration",
    "particulars",
    "amount",
    "debit",
    "credit",
)

DEFAULT_SCAN_ROWS = 12
DEFAULT_MIN_KEYWORD_HITS = 2


class HeaderNotFound(ValueError):
    """No scanned row reached the keyword threshold.

    ``best_row`` / ``best_score`` describe the strongest candidate (``None`` /
    ``0`` for an empty grid) so callers can still proceed best-effort.
    """

    def __init__(self, best_row: Optional[int], best_score: int, min_keyword_hits: int):
        self.best_row = best_row
        self.best_score = best_score
        self.min_keyword_hits = min_keyword_hits
        super().__init__(
            f"Could not detect a header row (best score {best_score}, "
            f"need {min_keyword_hits})"
        )


def row_text(row: Sequence[Any]) -> str:
    return " ".join(str(cell) for cell in row if not is_blank(cell)).lower()


def score_row(row: Sequence[Any], keywords: Iterable[str] = HEADER_KEYWORDS) -> int:
    """Count distinct keywords appearing anywhere in the row."""
    text = row_text(row)
    return sum(1 for keyword in set(keywords) if keyword in text)


def detect_header_row(
    rows: List[Sequence[Any]],
    keywords: Iterable[str] = HEADER_KEYWORDS,
    scan_rows: int = DEFAULT_SCAN_ROWS,
    min_keyword_hits: int = DEFAULT_MIN_KEYWORD_HITS,
) -> int:
    """Return the index of the header row within the first ``scan_rows`` rows.

    Raises:
        HeaderNotFound: if the best score is below ``min_keyword_hits`` or
            the grid is empty.
    """
    keywords = tuple(keywords)
    best_row: Optional[int] = None
    best_score = -1

    for idx, row in enumerate(rows[:scan_rows]):
        score = score_row(row or [], keywords)
        # Strictly greater: an equal score later on never replaces the first pick
        if score > best_score:
            best_row, best_score = idx, score

    if best_row is None or best_score < min_keyword_hits:
        raise HeaderNotFound(best_row, max(best_score, 0), min_keyword_hits)

    logger.debug(f"Header row {best_row} matched {best_score} keywords")
    return best_row
