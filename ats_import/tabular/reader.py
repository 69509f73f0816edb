from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath
from typing import Any

import pandas as pd

from ..logging.init import sheet_logger
from ..models.error_record import ImportErrorKind
from .csv_text import parse_records, split_header

"""Tabular reader: CSV text or workbook bytes -> header-labeled string tables.

No semantic interpretation happens here. Headers are lower-cased and trimmed,
cells are plain strings. Workbooks are read with pandas (openpyxl for .xlsx,
xlrd for .xls); the first row of every sheet is the header row.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "FileFormat",
    "ParseError",
    "EmptySheetError",
    "Table",
    "Workbook",
    "detect_format",
    "read_csv",
    "read_workbook",
    "sheet_to_table",
]

DATE_CELL_FORMAT = "%d/%m/%Y"
LEGACY_CSV_ENCODING = "cp1252"


class FileFormat(Enum):
    CSV = "csv"
    WORKBOOK = "workbook"


EXTENSION_FORMATS = {
    ".csv": FileFormat.CSV,
    ".xlsx": FileFormat.WORKBOOK,
    ".xls": FileFormat.WORKBOOK,
}


class ParseError(Exception):
    """Raised when a file cannot be decoded at all."""

    def __init__(self, message: str, kind: ImportErrorKind = ImportErrorKind.MALFORMED_FILE) -> None:
        super().__init__(message)
        self.kind = kind


class EmptySheetError(ParseError):
    """Raised when a workbook sheet has fewer than 2 rows (header only or empty)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=ImportErrorKind.EMPTY_SHEET)


@dataclass
class Table:
    headers: list[str]
    rows: list[list[str]]  # 行ごとの文字列セル (ヘッダ行を除く)


@dataclass
class Workbook:
    sheets: dict[str, Table]  # sheet name -> table, workbook order
    skipped: dict[str, str] = field(default_factory=dict)  # sheet name -> reason


def detect_format(filename: str, accepted_extensions: list[str] | None = None) -> FileFormat:
    """Pick the reader for a file name by its extension (case-insensitive)."""
    suffix = PurePath(filename).suffix.lower()
    if accepted_extensions is not None and suffix not in {e.lower() for e in accepted_extensions}:
        raise ParseError(f"unsupported file type: {filename}")
    fmt = EXTENSION_FORMATS.get(suffix)
    if fmt is None:
        raise ParseError(f"unsupported file type: {filename}")
    return fmt


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning(f"csv: not UTF-8 ({e.reason} at byte {e.start}), decoding as {LEGACY_CSV_ENCODING}")
        return data.decode(LEGACY_CSV_ENCODING, errors="replace")


def read_csv(data: bytes | str) -> Table:
    """Read delimited text.

    Bytes are decoded as UTF-8 (a BOM is dropped), falling back to cp1252 with
    undecodable bytes replaced by U+FFFD; only binary content (NUL bytes) is a
    ParseError.
    """
    if isinstance(data, bytes):
        text = _decode_text(data)
    else:
        text = data.lstrip("\ufeff")
    if "\x00" in text:
        raise ParseError("file contains binary data, not delimited text")
    headers, rows = split_header(parse_records(text))
    logger.debug(f"csv: headers={headers} rows={len(rows)}")
    return Table(headers=headers, rows=rows)


def _cell_to_text(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "Yes" if val else "No"
    if isinstance(val, (datetime, date)):
        if pd.isna(val):  # NaT
            return ""
        return val.strftime(DATE_CELL_FORMAT)
    if isinstance(val, float):
        if pd.isna(val):
            return ""
        if val.is_integer():
            # 電話番号などの整数が 1234.0 表記になるのを防ぐ
            return str(int(val))
        return str(val)
    return str(val).strip()


def sheet_to_table(df: pd.DataFrame, sheet_name: str) -> Table:
    """Convert a raw (header=None) sheet DataFrame to a Table.

    Steps:
    1. Validate at least 2 rows exist (1: header, 2+: data)
    2. Header row is lower-cased, trimmed, blank -> ""
    3. Fully blank data rows are skipped
    """
    if df.shape[0] < 2:
        raise EmptySheetError(f"sheet '{sheet_name}' has no data rows")
    headers = [_cell_to_text(c).lower() for c in df.iloc[0].tolist()]
    rows: list[list[str]] = []
    for raw in df.iloc[1:].itertuples(index=False, name=None):
        cells = [_cell_to_text(v) for v in raw]
        if not any(cells):
            continue
        rows.append(cells)
    return Table(headers=headers, rows=rows)


def read_workbook(data: bytes) -> Workbook:
    """Read every sheet of a workbook.

    Malformed input raises ParseError for the whole file; sheets with fewer
    than 2 rows are listed in ``Workbook.skipped`` instead.
    """
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
    except Exception as e:
        raise ParseError(f"cannot open workbook: {e}") from e

    sheets: dict[str, Table] = {}
    skipped: dict[str, str] = {}
    with xls:
        for name in xls.sheet_names:
            try:
                df = xls.parse(name, header=None, dtype=object, keep_default_na=False)
            except Exception as e:
                raise ParseError(f"cannot read sheet '{name}': {e}") from e
            try:
                sheets[str(name)] = sheet_to_table(df, str(name))
            except EmptySheetError as e:
                sheet_logger(logger, str(name)).warning(f"{e}")
                skipped[str(name)] = str(e)
    logger.debug(f"workbook: sheets={list(sheets)} skipped={list(skipped)}")
    return Workbook(sheets=sheets, skipped=skipped)
