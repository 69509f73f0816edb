from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

"""Downloadable import template.

The column order is significant: it is the order users fill in and the order
the header aliases in ats_import.normalize.fields are documented against.
"""

__all__ = [
    "TEMPLATE_COLUMNS",
    "TEMPLATE_FILE_NAME",
    "escape_csv_field",
    "render_csv",
    "render_template",
    "write_template",
]

TEMPLATE_FILE_NAME = "candidate-import-template.csv"

TEMPLATE_COLUMNS = [
    "Date",
    "Name",
    "Email",
    "Phone No",
    "Location",
    "Experience",
    "Expertise",
    "Notice Period",
    "Willing to work on Alternate Saturday",
    "Work Preference",
    "Current CTC",
    "CTC Frequency",
    "Expected CTC",
    "In House Assignment",
    "Interview Date",
    "Interviewer Name",
    "In Office Assignment",
    "HR Remarks",
    "Skills",
    "Source",
    "Status",
    "Resume Location/Link",
    "Assignment Location/Link",
]

EXAMPLE_ROWS = [
    [
        "15/01/2025", "John Doe", "john@example.com", "+91-9876543210", "Bangalore",
        "5 years", "Frontend Development", "30", "Yes", "Hybrid", "8 LPA", "Annual",
        "12 LPA", "Completed", "20/01/2025", "Jane Smith", "Pending",
        "Strong technical background, good communication", "React;TypeScript;Node.js",
        "LinkedIn", "Applied", "https://example.com/resumes/john-doe.pdf",
        "https://example.com/assignments/john-doe",
    ],
    [
        "16/01/2025", "Priya Sharma", "priya@example.com", "+91-9876543211", "Pune",
        "3 years", "Backend Development", "60", "No", "Remote", "6 LPA", "Annual",
        "9 LPA", "Not Assigned", "", "", "", 'Prefers "remote first" teams',
        "Python;Django;PostgreSQL", "Naukri", "Screening",
        "https://example.com/resumes/priya-sharma.pdf", "",
    ],
]

_NEEDS_QUOTES = (",", '"', "\n", "\r")


def escape_csv_field(value: str) -> str:
    """Quote a value when it contains a delimiter, quote or line break.

    Values with leading or trailing whitespace are quoted too, since unquoted
    fields are trimmed on read.
    """
    if any(c in value for c in _NEEDS_QUOTES) or value != value.strip():
        return '"' + value.replace('"', '""') + '"'
    return value


def render_csv(header: Iterable[str], rows: Iterable[Iterable[str]]) -> str:
    lines = [",".join(escape_csv_field(h) for h in header)]
    lines.extend(",".join(escape_csv_field(v) for v in row) for row in rows)
    return "\n".join(lines) + "\n"


def render_template() -> str:
    """The 23-column template with two example rows."""
    return render_csv(TEMPLATE_COLUMNS, EXAMPLE_ROWS)


def write_template(target: Path) -> Path:
    """Write the template; a directory target receives the default file name."""
    if target.is_dir():
        target = target / TEMPLATE_FILE_NAME
    target.write_text(render_template(), encoding="utf-8")
    return target
