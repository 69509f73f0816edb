from __future__ import annotations

from ..models.batch import ImportBatch
from ..models.session import ImportSession, SessionStatus

"""SUMMARY line rendering for an import session.

Format:
SUMMARY file={name} status={status} sheets={mapped}/{total} skipped_sheets={n}
candidates={ready} dropped={n} committed={n}
"""


def render_summary_line(session: ImportSession, batch: ImportBatch | None = None) -> str:
    """Render the SUMMARY line for ``session``.

    ``sheets`` counts mapped/usable sheets in multi-sheet mode and is ``1/1``
    (or ``0/0`` for a failed read) otherwise.

    Examples:
        >>> s = ImportSession(file_name="people.csv", status=SessionStatus.READY_SINGLE)
        >>> render_summary_line(s)
        'SUMMARY file=people.csv status=ready_single sheets=1/1 skipped_sheets=0 candidates=0 dropped=0 committed=0'
    """
    if session.sheets or session.status == SessionStatus.READY_MULTI_SHEET:
        total_sheets = len(session.sheets)
        mapped_sheets = len(session.mapped_sheets)
    elif session.status in (SessionStatus.ERROR, SessionStatus.IDLE):
        total_sheets = mapped_sheets = 0
    else:
        total_sheets = mapped_sheets = 1

    committed = len(batch) if batch is not None else 0
    return (
        f"SUMMARY file={session.file_name or '-'} "
        f"status={session.status.value} "
        f"sheets={mapped_sheets}/{total_sheets} "
        f"skipped_sheets={len(session.skipped_sheets)} "
        f"candidates={session.candidate_count} "
        f"dropped={session.dropped_rows} "
        f"committed={committed}"
    )
