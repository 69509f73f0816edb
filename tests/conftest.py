# Shared pytest fixtures
from __future__ import annotations
import io
import tempfile
from datetime import UTC, datetime
from pathlib import Path

import pandas as pd
import pytest

from ats_import.models.job import Job

FIXED_NOW = datetime(2025, 3, 1, 9, 30, 0, tzinfo=UTC)
FIXED_NOW_ISO = "2025-03-01T09:30:00Z"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def sample_config_yaml() -> str:
    return """default_assignee_id: 7
default_source: Bulk Import
default_stage: Applied
max_batch_size: 2
accepted_extensions: [.csv, .xlsx]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_jobs_yaml() -> str:
    return """jobs:
  - id: 10
    title: Frontend Engineer
    department: Engineering
    status: Active
    assignedTo: [3, 4]
  - id: 20
    title: Data Analyst
    department: Analytics
    status: Paused
    assignedTo: []
  - id: 30
    title: QA Engineer
    department: Engineering
    status: Active
    assignedTo: []
"""


@pytest.fixture()
def write_jobs(temp_workdir: Path, sample_jobs_yaml: str) -> Path:
    path = temp_workdir / "config" / "jobs.yml"
    path.write_text(sample_jobs_yaml, encoding="utf-8")
    return path


@pytest.fixture()
def jobs() -> list[Job]:
    return [
        Job(id=10, title="Frontend Engineer", assigned_to=[3, 4], department="Engineering"),
        Job(id=20, title="Data Analyst", assigned_to=[], department="Analytics", status="Paused"),
        Job(id=30, title="QA Engineer", assigned_to=[], department="Engineering"),
    ]


def make_workbook_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    """Build an .xlsx in memory; every list is written verbatim (first row = header)."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def workbook_bytes():
    return make_workbook_bytes
