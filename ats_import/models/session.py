from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..logging.error_log import ErrorLogBuffer
from .candidate import CandidateDraft

if TYPE_CHECKING:
    from ..tabular.reader import Table

"""ImportSession and SheetImportState.

The session is the single explicit holder of import state: whatever renders
progress gets the session object, nothing is stored at module level.

State transitions: idle -> processing -> (ready_single | ready_multi_sheet | error)
                   ready_* -> committed
"""

__all__ = [
    "ImportSession",
    "SessionStatus",
    "SheetImportState",
    "SheetStatus",
]


class SessionStatus(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    READY_SINGLE = "ready_single"
    READY_MULTI_SHEET = "ready_multi_sheet"
    ERROR = "error"
    COMMITTED = "committed"


class SheetStatus(Enum):
    UNMAPPED = "unmapped"
    MAPPED_UNPARSED = "mapped_unparsed"
    MAPPED_PARSED = "mapped_parsed"


@dataclass
class SheetImportState:
    """Per-sheet mapping state in multi-sheet mode.

    ``drafts`` stays None until the sheet is mapped for the first time; after
    that it is never recomputed, re-mapping only changes ``job_id``.
    """
    sheet_name: str
    table: Table
    job_id: str | None = None
    drafts: list[CandidateDraft] | None = None
    dropped_rows: int = 0

    @property
    def status(self) -> SheetStatus:
        if not self.job_id:
            return SheetStatus.UNMAPPED
        if self.drafts is None:
            return SheetStatus.MAPPED_UNPARSED
        return SheetStatus.MAPPED_PARSED

    @property
    def draft_count(self) -> int:
        return len(self.drafts) if self.drafts is not None else 0


@dataclass
class ImportSession:
    """State of one import: one file, its sheets, mappings and results."""
    file_name: str | None = None
    status: SessionStatus = SessionStatus.IDLE
    drafts: list[CandidateDraft] = field(default_factory=list)  # single-table mode
    sheets: dict[str, SheetImportState] = field(default_factory=dict)  # multi-sheet mode
    skipped_sheets: dict[str, str] = field(default_factory=dict)  # sheet -> reason
    dropped_rows: int = 0
    error: str | None = None
    error_log: ErrorLogBuffer = field(default_factory=ErrorLogBuffer)
    next_index: int = 0  # running counter for import-<n> ids

    def reset(self, file_name: str | None = None) -> None:
        """Discard everything and start over (a new file was selected)."""
        self.file_name = file_name
        self.status = SessionStatus.IDLE
        self.drafts = []
        self.sheets = {}
        self.skipped_sheets = {}
        self.dropped_rows = 0
        self.error = None
        self.error_log = ErrorLogBuffer()
        self.next_index = 0

    @property
    def is_ready(self) -> bool:
        return self.status in (SessionStatus.READY_SINGLE, SessionStatus.READY_MULTI_SHEET)

    @property
    def mapped_sheets(self) -> list[SheetImportState]:
        return [s for s in self.sheets.values() if s.job_id]

    @property
    def candidate_count(self) -> int:
        """Drafts ready to import (mapped sheets only in multi-sheet mode)."""
        if self.sheets:
            return sum(s.draft_count for s in self.mapped_sheets)
        return len(self.drafts)
