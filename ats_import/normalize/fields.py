from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..models.candidate import CandidateDraft
from .dates import to_iso_date, to_iso_datetime
from .numeric import clean_numeric

"""Header alias table: lower-cased column header -> field setter.

The table is built once at import time and shared by the CSV and workbook
paths. Several spellings may point at the same setter.
"""

__all__ = [
    "FieldContext",
    "FIELD_SETTERS",
    "ALIASES",
    "parse_tri_state",
    "split_skills",
]


@dataclass(frozen=True)
class FieldContext:
    """Per-import values the setters need besides the cell itself."""
    now: datetime
    default_source: str = "Bulk Import"
    default_stage: str = "Applied"


Setter = Callable[[CandidateDraft, str, FieldContext], None]


def parse_tri_state(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered == "yes":
        return True
    if lowered == "no":
        return False
    return None


def split_skills(value: str) -> list[str]:
    return [part.strip() for part in value.split(";") if part.strip()]


def _text(attr: str) -> Setter:
    def setter(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
        setattr(draft, attr, value)
    return setter


def _applied_date(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.applied_date = to_iso_datetime(value, ctx.now)


def _interview_date(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.interview_date = to_iso_date(value)


def _skills(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.skills = split_skills(value)


def _notice_period(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.notice_period = clean_numeric(value)


def _alternate_saturday(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.willing_alternate_saturday = parse_tri_state(value)


def _source(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.source = value or ctx.default_source


def _stage(draft: CandidateDraft, value: str, ctx: FieldContext) -> None:
    draft.stage = value or ctx.default_stage


# canonical setter -> accepted header spellings
ALIASES: list[tuple[Setter, tuple[str, ...]]] = [
    (_applied_date, ("date", "applied date")),
    (_text("name"), ("name", "full name", "candidate name")),
    (_text("email"), ("email", "email address", "email id")),
    (_text("phone"), ("phone", "phone number", "phone no")),
    (_text("location"), ("location",)),
    (_text("experience"), ("experience", "years of experience")),
    (_text("expertise"), ("expertise",)),
    (_notice_period, ("notice period",)),
    (_alternate_saturday, ("willing to work on alternate saturday",)),
    (_text("work_preference"), ("work preference",)),
    (_text("current_ctc"), ("current ctc",)),
    (_text("ctc_frequency"), ("ctc frequency",)),
    (_text("expected_salary"), ("expected ctc", "expected salary")),
    (_text("in_house_assignment_status"), ("in house assignment", "in house assignment status")),
    (_interview_date, ("interview date",)),
    (_text("interviewer_name"), ("interviewer name", "interviewer")),
    (_text("in_office_assignment"), ("in office assignment",)),
    (_text("notes"), ("notes", "hr remarks", "remarks")),
    (_skills, ("skills",)),
    (_source, ("source",)),
    (_stage, ("status", "stage")),
    (_text("resume_location"), ("resume location/link", "resume location", "resume link")),
    (
        _text("assignment_location"),
        ("assignment location/link", "assignment location", "assignment link"),
    ),
]

FIELD_SETTERS: dict[str, Setter] = {
    alias: setter for setter, aliases in ALIASES for alias in aliases
}
