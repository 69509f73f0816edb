from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

"""ErrorRecord model and error taxonomy for the import pipeline.

ErrorRecord supports row=-1 as a sentinel value for file-level errors where
the row cannot be determined (malformed file, empty sheet).
"""

__all__ = [
    "ErrorRecord",
    "ImportErrorKind",
    "FILE_LEVEL_SHEET",
]

FILE_LEVEL_SHEET = "<FILE_LEVEL>"


class ImportErrorKind(Enum):
    """Error classification, rendered in UPPER_SNAKE_CASE in the error log.

    - MALFORMED_FILE: file cannot be decoded at all (fatal to the session)
    - EMPTY_SHEET: workbook sheet with fewer than 2 rows (fatal to that sheet)
    - UNPARSABLE_FIELD: cell failed its coercion rule (never raised)
    - MISSING_REQUIRED_IDENTITY: row without name and email (silently dropped)
    - NO_JOB_MAPPED: commit without any job selection
    - EMPTY_BATCH: commit with nothing to import
    """
    MALFORMED_FILE = "MALFORMED_FILE"
    EMPTY_SHEET = "EMPTY_SHEET"
    UNPARSABLE_FIELD = "UNPARSABLE_FIELD"
    MISSING_REQUIRED_IDENTITY = "MISSING_REQUIRED_IDENTITY"
    NO_JOB_MAPPED = "NO_JOB_MAPPED"
    EMPTY_BATCH = "EMPTY_BATCH"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Import file name
        sheet: Sheet name (``<FILE_LEVEL>`` for CSV files and file-level errors)
        row: Data row number (1-based). -1 when the row is unknown
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        file: str, sheet: str, row: int, error_type: ImportErrorKind | str, message: str
    ) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        if isinstance(error_type, ImportErrorKind):
            error_type = error_type.value
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
