from __future__ import annotations

import re

from ats_import.models.session import ImportSession, SessionStatus
from ats_import.services.summary import render_summary_line

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+file=(\S+)\s+status=([a-z_]+)\s+sheets=([0-9]+)/([0-9]+)\s+"
    r"skipped_sheets=([0-9]+)\s+candidates=([0-9]+)\s+dropped=([0-9]+)\s+committed=([0-9]+)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY file=candidates.xlsx status=committed sheets=2/3 skipped_sheets=1 "
        "candidates=42 dropped=3 committed=42"
    )
    m = SUMMARY_PATTERN.match(line)
    assert m, "SUMMARY line should match contract regex"
    assert int(m.group(3)) <= int(m.group(4))


def test_rendered_lines_match_pattern():
    for status in SessionStatus:
        line = render_summary_line(ImportSession(file_name="x.csv", status=status))
        assert SUMMARY_PATTERN.match(line), line
