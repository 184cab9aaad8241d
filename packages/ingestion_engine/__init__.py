"""
WealthMate Ingestion Engine

Schema-sniffing statement parsing and normalization into transactions.
"""

__version__ = "0.1.0"

from .cells import parse_amount, parse_date
from .column_mapper import map_columns
from .excel_parser import UnreadableStatement, load_sheet_rows
from .header_detector import HEADER_KEYWORDS, HeaderNotFound, detect_header_row
from .ingestor import IngestionResult, StatementBatch, StatementIngestor
from .models import ColumnMapping, Transaction, TransactionKind
from .normalizer import normalize_row
from .store import TransactionStore

__all__ = [
    "parse_amount",
    "parse_date",
    "map_columns",
    "load_sheet_rows",
    "UnreadableStatement",
    "HEADER_KEYWORDS",
    "HeaderNotFound",
    "detect_header_row",
    "IngestionResult",
    "StatementBatch",
    "StatementIngestor",
    "ColumnMapping",
    "Transaction",
    "TransactionKind",
    "normalize_row",
    "TransactionStore",
]
