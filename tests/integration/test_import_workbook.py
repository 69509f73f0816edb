from __future__ import annotations

import json
from pathlib import Path

import pytest

from ats_import.cli.__main__ import EXIT_REJECTED, EXIT_SUCCESS, main
from ats_import.logging.init import reset_logging

ENGINEERING = [
    ["Date", "Name", "Email", "Phone No", "Skills", "Willing to work on Alternate Saturday", "Interview Date"],
    ["15/01/2025", "Alice", "alice@x.com", 9876543210, "React; Go", "Yes", "20/01/2025"],
    ["16/01/2025", "Bob", "bob@x.com", None, "", "maybe", "soon"],
    [None, None, None, 12345, "Rust", None, None],
]
SALES = [
    ["Name", "Email", "Source"],
    ["Carol", "carol@x.com", "Referral"],
]
NOTES = [["Name", "Email"]]


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def workbook_path(temp_workdir: Path, workbook_bytes) -> Path:
    path = temp_workdir / "data" / "candidates.xlsx"
    path.write_bytes(workbook_bytes({"Engineering": ENGINEERING, "Sales": SALES, "Notes": NOTES}))
    return path


def test_multi_sheet_import_end_to_end(workbook_path: Path, write_jobs: Path, temp_workdir: Path, capsys):
    out_path = temp_workdir / "payload.json"
    code = main(
        [
            str(workbook_path),
            "--jobs", str(write_jobs),
            "--map", "Engineering=10",
            "--output", str(out_path),
            "--error-log",
        ]
    )
    assert code == EXIT_SUCCESS

    bodies = json.loads(out_path.read_text(encoding="utf-8"))
    records = [r for body in bodies for r in body["candidates"]]
    assert [r["name"] for r in records] == ["Alice", "Bob"]
    alice, bob = records
    assert alice["jobId"] == 10
    assert alice["position"] == "Frontend Engineer"
    assert alice["assignedTo"] == 3
    assert alice["source"] == "Bulk Import (Engineering)"
    assert alice["phone"] == "9876543210"
    assert alice["skills"] == ["React", "Go"]
    assert alice["willingAlternateSaturday"] is True
    assert alice["appliedDate"] == "2025-01-15T00:00:00Z"
    assert alice["interviewDate"] == "2025-01-20"
    assert bob["willingAlternateSaturday"] is None
    assert bob["interviewDate"] == ""
    assert alice["localId"] != bob["localId"]

    out = capsys.readouterr().out
    assert "SUMMARY file=candidates.xlsx status=committed sheets=1/2 skipped_sheets=1" in out
    assert "candidates=2 dropped=1 committed=2" in out

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    kinds = sorted(json.loads(line)["error_type"] for line in logs[0].read_text(encoding="utf-8").splitlines())
    assert kinds == ["EMPTY_SHEET", "MISSING_REQUIRED_IDENTITY"]


def test_two_sheets_two_jobs(workbook_path: Path, write_jobs: Path, temp_workdir: Path):
    out_path = temp_workdir / "payload.json"
    code = main(
        [
            str(workbook_path),
            "--jobs", str(write_jobs),
            "--map", "Engineering=10",
            "--map", "Sales=30",
            "--output", str(out_path),
        ]
    )
    assert code == EXIT_SUCCESS
    records = json.loads(out_path.read_text(encoding="utf-8"))[0]["candidates"]
    sales = [r for r in records if r["jobId"] == 30]
    assert [r["source"] for r in sales] == ["Referral (Sales)"]
    assert sales[0]["assignedTo"] == 1
    assert len({r["localId"] for r in records}) == 3


def test_unmapped_workbook_is_rejected(workbook_path: Path, capsys):
    assert main([str(workbook_path)]) == EXIT_REJECTED
    assert "no sheet is mapped" in capsys.readouterr().out


def test_mapping_an_empty_sheet_is_rejected(workbook_path: Path, capsys):
    assert main([str(workbook_path), "--map", "Notes=10"]) == EXIT_REJECTED
    assert "not selectable" in capsys.readouterr().out
