import io
import logging
from typing import Any, List, Optional

import msoffcrypto
import pandas as pd

from .cells import is_blank

logger = logging.getLogger(__name__)

# OLE2 Compound Document magic bytes (legacy .xls and encrypted Office files)
_OLE2_MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
# ZIP local file header (.xlsx / .xlsm)
_ZIP_MAGIC = b"PK\x03\x04"

# latin-1 accepts any byte sequence, so it goes last
_CSV_ENCODINGS = ["utf-8-sig", "cp1252", "latin-1"]
_CSV_DELIMITERS = (",", ";", "\t", "|")


class UnreadableStatement(ValueError):
    """The uploaded file could not be decoded into rows at all."""


def _is_ole2(file_content: bytes) -> bool:
    """Check if file starts with the OLE2 magic bytes (legacy .xls or encryption wrapper)."""
    return file_content[:8] == _OLE2_MAGIC


def _is_zip(file_content: bytes) -> bool:
    return file_content[:4] == _ZIP_MAGIC


def _decrypt(file_content: bytes, password: str) -> io.BytesIO:
    decrypted_workbook = io.BytesIO()
    try:
        with io.BytesIO(file_content) as f:
            office_file = msoffcrypto.OfficeFile(f)
            office_file.load_key(password=password)
            office_file.decrypt(decrypted_workbook)
    except Exception as e:
        msg = str(e).lower()
        if "password" in msg or "decrypt" in msg or "key" in msg:
            raise UnreadableStatement("Invalid password") from e
        raise UnreadableStatement(f"Failed to decrypt file: {e}") from e
    decrypted_workbook.seek(0)
    return decrypted_workbook


def _is_encrypted(file_content: bytes) -> bool:
    try:
        with io.BytesIO(file_content) as f:
            return msoffcrypto.OfficeFile(f).is_encrypted()
    except Exception:
        # Not an Office container msoffcrypto understands; let the reader decide
        return False


def _trim(row: List[Any]) -> List[Any]:
    cells = [None if is_blank(cell) else cell for cell in row]
    while cells and cells[-1] is None:
        cells.pop()
    return cells


def _frame_to_rows(df: pd.DataFrame) -> List[List[Any]]:
    df = df.astype(object).where(pd.notna(df), None)
    return [_trim(list(row)) for row in df.itertuples(index=False, name=None)]


def _read_workbook(workbook: io.BytesIO, engine: Optional[str]) -> List[List[Any]]:
    # First sheet only; header=None keeps the preamble so the header can be sniffed
    try:
        df = pd.read_excel(
            workbook, sheet_name=0, header=None, dtype=object, engine=engine
        )
    except Exception as e:
        raise UnreadableStatement(f"Could not read spreadsheet: {e}") from e
    return _frame_to_rows(df)


def _sniff_delimiter(sample: str) -> str:
    # Most frequent candidate wins; ties keep the comma
    return max(_CSV_DELIMITERS, key=sample.count)


def _read_csv(file_content: bytes) -> List[List[Any]]:
    # Statement CSVs are ragged (short preamble lines); naming enough columns
    # up front lets pandas pad short rows instead of rejecting them
    for encoding in _CSV_ENCODINGS:
        try:
            text = file_content.decode(encoding)
        except UnicodeDecodeError:
            continue

        sep = _sniff_delimiter(text[:4096])
        width = max((line.count(sep) + 1 for line in text.splitlines()), default=1)
        try:
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                names=range(width),
                sep=sep,
                dtype=object,
                keep_default_na=False,
                skip_blank_lines=False,
                engine="python",
            )
        except Exception as e:
            raise UnreadableStatement(f"Could not read CSV file: {e}") from e
        return _frame_to_rows(df)

    raise UnreadableStatement("Could not decode CSV file with any known encoding")


def load_sheet_rows(file_content: bytes, password: Optional[str] = None) -> List[List[Any]]:
    """
    Decode a statement file into a grid of raw cells (first sheet only).

    Handles .xlsx/.xlsm, legacy .xls, password-protected workbooks and
    delimited text. Blank cells become ``None``; trailing blanks are trimmed.
    """
    if not file_content:
        raise UnreadableStatement("File is empty")

    if _is_ole2(file_content):
        # Either a legacy .xls or an encrypted .xlsx
        if _is_encrypted(file_content):
            if not password:
                raise UnreadableStatement("Password required")
            logger.info("Decrypting password-protected workbook")
            return _read_workbook(_decrypt(file_content, password), engine="openpyxl")
        return _read_workbook(io.BytesIO(file_content), engine="xlrd")

    if _is_zip(file_content):
        # Plain .xlsx (ZIP-based OOXML), no decryption needed
        return _read_workbook(io.BytesIO(file_content), engine="openpyxl")

    return _read_csv(file_content)
