from __future__ import annotations

import re

"""Numeric clean-up for free-text amount fields.

``clean_numeric`` is applied to notice periods during import. ``clean_ctc`` is
the form-entry normalizer for salary fields; bulk import stores CTC and
salary cells verbatim and does not call it.
"""

__all__ = [
    "clean_numeric",
    "clean_ctc",
]

LPA = "LPA"

_NOT_NUMERIC = re.compile(r"[^0-9.]")
_NOT_CTC = re.compile(r"[^0-9.LPAlpa]")
_PLAIN_NUMBER = re.compile(r"^\d*\.?\d*$")


def clean_numeric(value: str, allow_decimals: bool = True) -> str:
    """Keep digits and (optionally) the first decimal point."""
    cleaned = _NOT_NUMERIC.sub("", value or "")
    if not allow_decimals:
        return cleaned.replace(".", "")
    head, dot, tail = cleaned.partition(".")
    return head + dot + tail.replace(".", "")


def clean_ctc(value: str) -> str:
    """Normalize a CTC entry such as ``"8.5 lpa"`` to ``"8.5LPA"``.

    A purely numeric entry (one optional decimal point) is returned unchanged
    so the user can keep typing. Otherwise every ``LPA`` token is removed and
    a single trailing ``LPA`` is appended; partial units (``"8L"``) are left
    alone until the token is complete.
    """
    cleaned = _NOT_CTC.sub("", value or "").upper()
    if _PLAIN_NUMBER.match(cleaned) or LPA not in cleaned:
        return cleaned
    return cleaned.replace(LPA, "") + LPA
