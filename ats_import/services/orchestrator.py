from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..config.loader import ImportConfig
from ..logging.init import sheet_logger
from ..models.batch import ImportBatch
from ..models.candidate import CandidateDraft
from ..models.error_record import FILE_LEVEL_SHEET, ErrorRecord, ImportErrorKind
from ..models.job import Job, find_job
from ..models.session import ImportSession, SessionStatus, SheetImportState
from ..normalize.row import Clock, NormalizeResult, normalize_table, utc_now
from ..tabular.reader import FileFormat, ParseError, Table, detect_format, read_csv, read_workbook

"""Import orchestration.

Drives the tabular reader and the row normalizer over one CSV table or the
sheets of a workbook, keeps the sheet -> job mapping on an ImportSession, and
assembles the ImportBatch at commit time.

Failure policy:
- read failures put the session in ERROR with no partial data
- empty sheets are skipped, the rest of the workbook stays usable
- field and row level anomalies never surface here (fallbacks / silent drops)
- commits without a job mapping, to a job that is not Active, or without
  records are rejected before any hand-off happens
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CommitRejectedError",
    "SessionStateError",
    "select_file",
    "load_file",
    "map_sheet",
    "commit_single",
    "commit_all_mapped",
    "stamp_job",
]


class SessionStateError(Exception):
    """Operation not allowed in the session's current state."""


class CommitRejectedError(Exception):
    """Commit refused before anything was handed off."""

    def __init__(self, message: str, kind: ImportErrorKind) -> None:
        super().__init__(message)
        self.kind = kind


def _normalize(
    session: ImportSession, table: Table, config: ImportConfig, clock: Clock, sheet: str
) -> NormalizeResult:
    result = normalize_table(
        table,
        clock=clock,
        start_index=session.next_index,
        default_source=config.default_source,
        default_stage=config.default_stage,
    )
    session.next_index += len(table.rows)
    session.dropped_rows += len(result.dropped_rows)
    for row_no in result.dropped_rows:
        session.error_log.append(
            ErrorRecord.create(
                file=session.file_name or "",
                sheet=sheet,
                row=row_no,
                error_type=ImportErrorKind.MISSING_REQUIRED_IDENTITY,
                message="row has neither name nor email",
            )
        )
    return result


def _fail(session: ImportSession, error: ParseError) -> ImportSession:
    session.drafts = []
    session.sheets = {}
    session.status = SessionStatus.ERROR
    session.error = str(error)
    session.error_log.append(
        ErrorRecord.create(
            file=session.file_name or "",
            sheet=FILE_LEVEL_SHEET,
            row=-1,
            error_type=error.kind,
            message=str(error),
        )
    )
    logger.error(f"{session.file_name}: processing error: {error}")
    return session


def select_file(
    session: ImportSession,
    data: bytes,
    file_name: str,
    *,
    config: ImportConfig | None = None,
    clock: Clock = utc_now,
) -> ImportSession:
    """Read a newly selected file into ``session``, replacing its state.

    CSV files and one-sheet workbooks end in READY_SINGLE with drafts
    normalized right away. Workbooks with several sheets end in
    READY_MULTI_SHEET with every usable sheet unmapped and unparsed; empty
    sheets are recorded in ``skipped_sheets`` and cannot be mapped.
    """
    config = config or ImportConfig()
    session.reset(file_name)
    session.status = SessionStatus.PROCESSING
    logger.info(f"Processing file: {file_name}")

    try:
        fmt = detect_format(file_name, config.accepted_extensions)
        if fmt == FileFormat.CSV:
            table = read_csv(data)
            session.drafts = _normalize(session, table, config, clock, FILE_LEVEL_SHEET).drafts
            session.status = SessionStatus.READY_SINGLE
            logger.info(f"{file_name}: {len(session.drafts)} candidates ready to import")
            return session
        workbook = read_workbook(data)
    except ParseError as e:
        return _fail(session, e)

    for name, reason in workbook.skipped.items():
        session.skipped_sheets[name] = reason
        session.error_log.append(
            ErrorRecord.create(
                file=file_name,
                sheet=name,
                row=-1,
                error_type=ImportErrorKind.EMPTY_SHEET,
                message=reason,
            )
        )

    if len(workbook.sheets) + len(workbook.skipped) <= 1:
        # one-sheet workbook behaves like a CSV file
        for name, table in workbook.sheets.items():
            session.drafts = _normalize(session, table, config, clock, name).drafts
        session.status = SessionStatus.READY_SINGLE
        logger.info(f"{file_name}: {len(session.drafts)} candidates ready to import")
        return session

    session.sheets = {
        name: SheetImportState(sheet_name=name, table=table)
        for name, table in workbook.sheets.items()
    }
    session.status = SessionStatus.READY_MULTI_SHEET
    if not session.sheets:
        logger.warning(f"{file_name}: no sheet contains data rows")
    logger.info(f"{file_name}: {len(session.sheets)} sheets available for mapping")
    return session


def load_file(
    path: Path,
    *,
    config: ImportConfig | None = None,
    clock: Clock = utc_now,
    session: ImportSession | None = None,
) -> ImportSession:
    """Convenience wrapper: read ``path`` from disk into a (new) session."""
    session = session if session is not None else ImportSession()
    try:
        data = path.read_bytes()
    except OSError as e:
        session.reset(path.name)
        return _fail(session, ParseError(f"cannot read file: {e}"))
    return select_file(session, data, path.name, config=config, clock=clock)


def map_sheet(
    session: ImportSession,
    sheet_name: str,
    job_id: int | str | None,
    *,
    config: ImportConfig | None = None,
    clock: Clock = utc_now,
) -> SheetImportState:
    """Assign (or clear, with None / "") the target job of one sheet.

    The sheet is parsed the first time it receives a job; later re-mapping
    keeps the drafts already parsed.
    """
    if session.status != SessionStatus.READY_MULTI_SHEET:
        raise SessionStateError(f"sheet mapping requires a multi-sheet session, not {session.status.value}")
    state = session.sheets.get(sheet_name)
    if state is None:
        if sheet_name in session.skipped_sheets:
            raise SessionStateError(f"sheet '{sheet_name}' is not selectable: {session.skipped_sheets[sheet_name]}")
        raise KeyError(sheet_name)

    job_key = str(job_id).strip() if job_id is not None else ""
    if job_key:
        int(job_key)  # job ids are numeric; ValueError for anything else
    state.job_id = job_key or None
    if state.job_id and state.drafts is None:
        result = _normalize(session, state.table, config or ImportConfig(), clock, sheet_name)
        state.drafts = result.drafts
        state.dropped_rows = len(result.dropped_rows)
        sheet_logger(logger, sheet_name).info(f"{len(state.drafts)} candidates mapped to job {state.job_id}")
    return state


def stamp_job(
    drafts: Iterable[CandidateDraft],
    job_id: int | str,
    jobs: Iterable[Job],
    *,
    default_assignee_id: int,
    source_suffix: str | None = None,
) -> list[dict[str, Any]]:
    """Payload dicts carrying jobId, position and assignedTo.

    An unknown job id yields ``position=""`` and the default assignee rather
    than an error.
    """
    job = find_job(jobs, job_id)
    position = job.title if job is not None else ""
    assigned_to = job.assigned_to[0] if job is not None and job.assigned_to else default_assignee_id
    records: list[dict[str, Any]] = []
    for draft in drafts:
        record = draft.to_payload()
        if source_suffix is not None:
            record["source"] = f"{record['source']} ({source_suffix})"
        record["jobId"] = int(job_id)
        record["position"] = position
        record["assignedTo"] = assigned_to
        records.append(record)
    return records


def _require_ready(session: ImportSession) -> None:
    if not session.is_ready:
        raise SessionStateError(f"nothing to commit in state {session.status.value}")


def _require_open_job(job_id: int | str, jobs: list[Job]) -> None:
    """Reject a known job that is not Active; unknown ids pass through."""
    job = find_job(jobs, job_id)
    if job is not None and not job.is_active:
        raise CommitRejectedError(
            f"job {job.id} ({job.title}) is {job.status}, not open for imports",
            ImportErrorKind.NO_JOB_MAPPED,
        )


def commit_single(
    session: ImportSession,
    job_id: int | str | None,
    jobs: Iterable[Job],
    *,
    config: ImportConfig | None = None,
) -> ImportBatch:
    """Commit the single table of a READY_SINGLE session to one job."""
    config = config or ImportConfig()
    _require_ready(session)
    if session.status != SessionStatus.READY_SINGLE:
        raise SessionStateError("single-job commit requires a single-table session")
    if job_id is None or not str(job_id).strip():
        raise CommitRejectedError("no job selected", ImportErrorKind.NO_JOB_MAPPED)
    jobs = list(jobs)
    _require_open_job(job_id, jobs)
    if not session.drafts:
        raise CommitRejectedError("no candidates to import", ImportErrorKind.EMPTY_BATCH)

    records = stamp_job(session.drafts, job_id, jobs, default_assignee_id=config.default_assignee_id)
    batch = ImportBatch(records=records, file_name=session.file_name)
    session.status = SessionStatus.COMMITTED
    logger.info(f"committed {len(batch)} candidates to job {job_id}")
    return batch


def commit_all_mapped(
    session: ImportSession,
    jobs: Iterable[Job],
    *,
    config: ImportConfig | None = None,
) -> ImportBatch:
    """Commit every mapped sheet of a READY_MULTI_SHEET session.

    Sheets without a mapping or without drafts contribute nothing. Each
    record's source is tagged with its sheet name.
    """
    config = config or ImportConfig()
    _require_ready(session)
    if session.status != SessionStatus.READY_MULTI_SHEET:
        raise SessionStateError("multi-sheet commit requires a multi-sheet session")
    mapped = session.mapped_sheets
    if not mapped:
        raise CommitRejectedError("no sheet is mapped to a job", ImportErrorKind.NO_JOB_MAPPED)

    jobs = list(jobs)
    for state in mapped:
        _require_open_job(state.job_id, jobs)
    records: list[dict[str, Any]] = []
    for state in mapped:
        if not state.drafts:
            sheet_logger(logger, state.sheet_name).debug("no candidates, skipped")
            continue
        records.extend(
            stamp_job(
                state.drafts,
                state.job_id,
                jobs,
                default_assignee_id=config.default_assignee_id,
                source_suffix=state.sheet_name,
            )
        )
    if not records:
        raise CommitRejectedError("mapped sheets contain no candidates", ImportErrorKind.EMPTY_BATCH)

    batch = ImportBatch(records=records, file_name=session.file_name)
    session.status = SessionStatus.COMMITTED
    logger.info(f"committed {len(batch)} candidates from {len(mapped)} sheets")
    return batch
