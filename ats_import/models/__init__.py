"""Domain models for the candidate bulk-import pipeline."""

from .batch import ImportBatch
from .candidate import CandidateDraft
from .error_record import ErrorRecord, ImportErrorKind
from .job import Job
from .session import ImportSession, SessionStatus, SheetImportState, SheetStatus

__all__ = [
    # Records
    "CandidateDraft",
    "ImportBatch",
    "Job",
    # Session state
    "ImportSession",
    "SessionStatus",
    "SheetImportState",
    "SheetStatus",
    # Errors
    "ErrorRecord",
    "ImportErrorKind",
]
