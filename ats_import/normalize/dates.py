from __future__ import annotations

import re
from datetime import UTC, date, datetime

"""Day-first date parsing.

Accepted shapes: ``DD/MM/YYYY`` and ``DD-MM-YYYY`` (one or two digit day and
month, four digit year, the same separator twice). A day above 12 is the only
thing that makes DD/MM order observable; anything else (two digit years, mixed
separators, impossible calendar dates) is a parse failure and callers apply
their own fallback.
"""

__all__ = [
    "parse_day_first",
    "to_iso_date",
    "to_iso_datetime",
]

_DAY_FIRST = re.compile(r"^(\d{1,2})([/-])(\d{1,2})\2(\d{4})$")


def parse_day_first(value: str) -> date | None:
    """Parse DD/MM/YYYY or DD-MM-YYYY; None when the value does not qualify."""
    if not value:
        return None
    m = _DAY_FIRST.match(value.strip())
    if m is None:
        return None
    day, month, year = int(m.group(1)), int(m.group(3)), int(m.group(4))
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_iso_date(value: str) -> str:
    """``YYYY-MM-DD`` or "" when unparsable."""
    parsed = parse_day_first(value)
    return parsed.isoformat() if parsed is not None else ""


def to_iso_datetime(value: str, now: datetime) -> str:
    """ISO8601 UTC datetime with 'Z' suffix; ``now`` when unparsable."""
    parsed = parse_day_first(value)
    if parsed is None:
        stamp = now if now.tzinfo is not None else now.replace(tzinfo=UTC)
    else:
        stamp = datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC)
    return stamp.astimezone(UTC).isoformat().replace("+00:00", "Z")
