from __future__ import annotations

import json
from pathlib import Path

import pytest

from ats_import.cli.__main__ import EXIT_FATAL, EXIT_REJECTED, EXIT_SUCCESS, _parse_mapping, main
from ats_import.logging.init import reset_logging
from ats_import.services.template import TEMPLATE_FILE_NAME

CSV = 'Name,Email,Skills\nJohn Doe,john@x.com,"React;TS"\n,incomplete@x.com,\n,,Go\n'


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def people_csv(temp_workdir: Path) -> Path:
    path = temp_workdir / "data" / "people.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


def test_template(temp_workdir: Path):
    assert main(["--template", str(temp_workdir)]) == EXIT_SUCCESS
    assert (temp_workdir / TEMPLATE_FILE_NAME).exists()


def test_no_file_is_fatal(temp_workdir: Path, capsys):
    assert main([]) == EXIT_FATAL
    assert "ERROR no input file given" in capsys.readouterr().out


def test_missing_file_is_fatal(temp_workdir: Path, capsys):
    assert main([str(temp_workdir / "data" / "nope.csv")]) == EXIT_FATAL
    out = capsys.readouterr().out
    assert "SUMMARY file=nope.csv status=error" in out


def test_single_commit_writes_output(people_csv: Path, write_jobs: Path, temp_workdir: Path, capsys):
    out_path = temp_workdir / "payload.json"
    code = main([str(people_csv), "--jobs", str(write_jobs), "--job-id", "10", "--output", str(out_path)])
    assert code == EXIT_SUCCESS
    bodies = json.loads(out_path.read_text(encoding="utf-8"))
    records = [r for body in bodies for r in body["candidates"]]
    assert [r["email"] for r in records] == ["john@x.com", "incomplete@x.com"]
    assert records[0]["position"] == "Frontend Engineer"
    assert records[0]["assignedTo"] == 3
    out = capsys.readouterr().out
    assert "SUMMARY file=people.csv status=committed sheets=1/1" in out
    assert "candidates=2 dropped=1 committed=2" in out


def test_config_batch_size_controls_chunks(people_csv: Path, write_config: Path, write_jobs: Path, temp_workdir: Path):
    people_csv.write_text(CSV + "Ann,ann@x.com,\nBen,ben@x.com,\nCal,cal@x.com,\n", encoding="utf-8")
    out_path = temp_workdir / "payload.json"
    # config/import.yml is picked up from the working directory (max_batch_size: 2)
    assert main([str(people_csv), "--jobs", str(write_jobs), "--job-id", "30", "--output", str(out_path)]) == 0
    bodies = json.loads(out_path.read_text(encoding="utf-8"))
    assert [len(b["candidates"]) for b in bodies] == [2, 2, 1]
    assert bodies[0]["candidates"][0]["assignedTo"] == 7


def test_config_from_environment(people_csv: Path, temp_workdir: Path, monkeypatch, capsys):
    bad = temp_workdir / "bad.yml"
    bad.write_text("max_batch_size: 1000\n", encoding="utf-8")
    monkeypatch.setenv("ATS_IMPORT_CONFIG", str(bad))
    assert main([str(people_csv), "--job-id", "10"]) == EXIT_FATAL
    assert "config validation failed" in capsys.readouterr().out


def test_missing_job_is_rejected(people_csv: Path, capsys):
    assert main([str(people_csv)]) == EXIT_REJECTED
    out = capsys.readouterr().out
    assert "commit rejected: no job selected" in out
    assert "status=ready_single" in out


def test_error_log_flag_writes_log(people_csv: Path, temp_workdir: Path):
    assert main([str(people_csv), "--job-id", "10", "--error-log"]) == EXIT_SUCCESS
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert record["error_type"] == "MISSING_REQUIRED_IDENTITY"
    assert record["row"] == 3


def test_inspect_data(people_csv: Path, capsys):
    assert main([str(people_csv), "--inspect-data"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "FILE: people.csv status=ready_single" in out
    assert "candidates=2 dropped=1" in out


@pytest.mark.parametrize(
    "raw,expected",
    [("Sales=10", ("Sales", "10")), ("Q1=Q2=7", ("Q1=Q2", "7")), (" A = 3 ", ("A", "3"))],
)
def test_parse_mapping(raw: str, expected):
    assert _parse_mapping(raw) == expected


@pytest.mark.parametrize("raw", ["Sales", "=10", "Sales="])
def test_parse_mapping_invalid(raw: str):
    with pytest.raises(ValueError):
        _parse_mapping(raw)


def test_inspect_data_lists_open_jobs_only(people_csv: Path, write_jobs: Path, capsys):
    assert main([str(people_csv), "--jobs", str(write_jobs), "--inspect-data"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "JOB: 10 Frontend Engineer" in out
    assert "JOB: 30 QA Engineer" in out
    assert "Data Analyst" not in out


def test_paused_job_is_rejected(people_csv: Path, write_jobs: Path, temp_workdir: Path, capsys):
    out_path = temp_workdir / "payload.json"
    code = main([str(people_csv), "--jobs", str(write_jobs), "--job-id", "20", "--output", str(out_path)])
    assert code == EXIT_REJECTED
    assert "is Paused" in capsys.readouterr().out
    assert not out_path.exists()
