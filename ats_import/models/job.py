from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

"""Job model: the mapping target of an import.

Jobs are loaded by the caller (see ats_import.config.loader.load_jobs); the
import pipeline only looks them up by id, it never validates them remotely.
"""

__all__ = [
    "Job",
    "active_jobs",
    "find_job",
]

ACTIVE_STATUS = "Active"


@dataclass(frozen=True)
class Job:
    """A job posting as known to the import pipeline."""
    id: int
    title: str
    assigned_to: list[int] = field(default_factory=list)  # first entry is the default owner
    department: str = ""
    status: str = ACTIVE_STATUS

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS


def active_jobs(jobs: Iterable[Job]) -> list[Job]:
    """Jobs that may be offered as mapping targets."""
    return [j for j in jobs if j.is_active]


def find_job(jobs: Iterable[Job], job_id: int | str) -> Job | None:
    """Look up a job by id; ids are compared in their string form."""
    wanted = str(job_id).strip()
    for job in jobs:
        if str(job.id) == wanted:
            return job
    return None
