from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""CandidateDraft model for the candidate bulk-import pipeline.

A CandidateDraft is the canonical record produced by the row normalizer, one per
accepted spreadsheet / CSV row. It is not persisted by this package; the
orchestrator stamps job data on top of `to_payload()` and hands the result to the
bulk-create collaborator.
"""

__all__ = [
    "CandidateDraft",
    "PAYLOAD_KEYS",
]

# attribute name -> payload (API) key
PAYLOAD_KEYS: dict[str, str] = {
    "local_id": "localId",
    "name": "name",
    "email": "email",
    "phone": "phone",
    "location": "location",
    "experience": "experience",
    "expertise": "expertise",
    "skills": "skills",
    "notice_period": "noticePeriod",
    "willing_alternate_saturday": "willingAlternateSaturday",
    "work_preference": "workPreference",
    "current_ctc": "currentCtc",
    "ctc_frequency": "ctcFrequency",
    "expected_salary": "expectedSalary",
    "in_house_assignment_status": "inHouseAssignmentStatus",
    "interview_date": "interviewDate",
    "interviewer_name": "interviewerName",
    "in_office_assignment": "inOfficeAssignment",
    "notes": "notes",
    "resume_location": "resumeLocation",
    "assignment_location": "assignmentLocation",
    "source": "source",
    "stage": "stage",
    "applied_date": "appliedDate",
    "score": "score",
    "communications": "communications",
    "salary_negotiable": "salaryNegotiable",
    "immediate_joiner": "immediateJoiner",
    "joining_time": "joiningTime",
}


@dataclass
class CandidateDraft:
    """In-memory, not yet persisted candidate record.

    Attributes:
        local_id: Synthetic id unique within one import session (``import-<n>``)
        skills: Ordered skill list split from a ``;`` delimited cell
        willing_alternate_saturday: Tri-state, None when the cell was not yes/no
        interview_date: ``YYYY-MM-DD`` or empty string when unparsable
        applied_date: ISO datetime, falls back to the clock's "now"
        extra: Unrecognized columns, keyed by lower-cased header
    """
    local_id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    experience: str = ""
    expertise: str = ""
    skills: list[str] = field(default_factory=list)
    notice_period: str = ""
    willing_alternate_saturday: bool | None = None
    work_preference: str = ""
    current_ctc: str = ""
    ctc_frequency: str = ""
    expected_salary: str = ""
    in_house_assignment_status: str = ""
    interview_date: str = ""
    interviewer_name: str = ""
    in_office_assignment: str = ""
    notes: str = ""
    resume_location: str = ""
    assignment_location: str = ""
    source: str = "Bulk Import"
    stage: str = "Applied"
    applied_date: str = ""
    # fixed defaults, never read from the source file
    score: int = 0
    communications: list[Any] = field(default_factory=list)
    salary_negotiable: bool = False
    immediate_joiner: bool = False
    joining_time: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def has_identity(self) -> bool:
        """True when the draft carries a name or an email."""
        return bool(self.name or self.email)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the bulk-create payload shape (camelCase keys).

        Extra columns are merged first so that a recognized field always wins
        over a pass-through column of the same spelling.
        """
        payload: dict[str, Any] = dict(self.extra)
        for attr, key in PAYLOAD_KEYS.items():
            value = getattr(self, attr)
            if isinstance(value, list):
                value = list(value)
            payload[key] = value
        return payload
