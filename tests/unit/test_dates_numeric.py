from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from ats_import.normalize.dates import parse_day_first, to_iso_date, to_iso_datetime
from ats_import.normalize.numeric import clean_ctc, clean_numeric


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("13/02/2025", date(2025, 2, 13)),
        ("13-02-2025", date(2025, 2, 13)),
        ("1/2/2025", date(2025, 2, 1)),
        (" 05/11/2024 ", date(2024, 11, 5)),
    ],
)
def test_parse_day_first_valid(raw: str, expected: date):
    assert parse_day_first(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "13/02/25", "13/02-2025", "2025-02-13", "31/02/2025", "02/13/2025", "tomorrow"],
)
def test_parse_day_first_failures(raw: str):
    assert parse_day_first(raw) is None


def test_to_iso_date_fallback_is_empty():
    assert to_iso_date("20/01/2025") == "2025-01-20"
    assert to_iso_date("not a date") == ""


def test_to_iso_datetime_fallback_is_now():
    now = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
    assert to_iso_datetime("15/01/2025", now) == "2025-01-15T00:00:00Z"
    assert to_iso_datetime("", now) == "2025-03-01T09:30:00Z"
    assert to_iso_datetime("garbage", now) == "2025-03-01T09:30:00Z"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("30 days", "30"),
        ("1.5 months", "1.5"),
        ("1.2.3", "1.23"),
        ("", ""),
        ("abc", ""),
    ],
)
def test_clean_numeric(raw: str, expected: str):
    assert clean_numeric(raw) == expected


def test_clean_numeric_without_decimals():
    assert clean_numeric("1.5 years", allow_decimals=False) == "15"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("12", "12"),
        ("12.5", "12.5"),
        ("8 lpa", "8LPA"),
        ("8.5 LPA", "8.5LPA"),
        ("LPA 8", "8LPA"),
        ("8LPALPA", "8LPA"),
        ("8 L", "8L"),
        ("₹ 8,00,000", "800000"),
    ],
)
def test_clean_ctc(raw: str, expected: str):
    assert clean_ctc(raw) == expected
