from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..models.candidate import CandidateDraft
from ..tabular.reader import Table
from .dates import to_iso_datetime
from .fields import FIELD_SETTERS, FieldContext

"""Row normalizer: (headers, row) -> CandidateDraft | None.

Pure and table-driven. Field level problems never raise; every coercion has a
fallback value. Rows with neither name nor email are dropped.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "Clock",
    "NormalizeResult",
    "normalize_row",
    "normalize_table",
    "utc_now",
]

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class NormalizeResult:
    drafts: list[CandidateDraft] = field(default_factory=list)
    dropped_rows: list[int] = field(default_factory=list)  # 1-based data row numbers


def normalize_row(
    headers: list[str],
    row: list[str],
    *,
    index: int,
    context: FieldContext,
) -> CandidateDraft | None:
    """Map one row to a draft.

    Parameters
    ----------
    headers: lower-cased header cells
    row: string cells; missing trailing cells count as ""
    index: row index used for the synthetic ``import-<index>`` id
    context: clock value and configured defaults
    """
    draft = CandidateDraft(
        local_id=f"import-{index}",
        source=context.default_source,
        stage=context.default_stage,
        applied_date=to_iso_datetime("", context.now),
    )
    for i, header in enumerate(headers):
        key = header.strip().lower()
        if not key:
            continue
        value = (row[i] if i < len(row) and row[i] is not None else "").strip()
        setter = FIELD_SETTERS.get(key)
        if setter is None:
            draft.extra[key] = value
        else:
            setter(draft, value, context)

    if not draft.has_identity:
        return None
    return draft


def normalize_table(
    table: Table,
    *,
    clock: Clock = utc_now,
    start_index: int = 0,
    default_source: str = "Bulk Import",
    default_stage: str = "Applied",
) -> NormalizeResult:
    """Normalize every data row of ``table``.

    The clock is read once per table so all fallback applied dates of one
    table agree.
    """
    context = FieldContext(now=clock(), default_source=default_source, default_stage=default_stage)
    result = NormalizeResult()
    for offset, row in enumerate(table.rows):
        draft = normalize_row(table.headers, row, index=start_index + offset, context=context)
        if draft is None:
            result.dropped_rows.append(offset + 1)
            continue
        result.drafts.append(draft)
    if result.dropped_rows:
        logger.debug(f"dropped {len(result.dropped_rows)} rows without name or email")
    return result
