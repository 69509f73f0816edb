from __future__ import annotations

"""Delimited text tokenizer.

Quote handling:
- ``"`` outside quotes opens a quoted section (not emitted)
- ``""`` inside quotes emits one literal ``"``
- ``"`` inside quotes otherwise closes the quoted section
- ``,`` ends the field unless quoted; line breaks end the record unless quoted

Whitespace around a field is trimmed, but text that came from inside quotes is
kept as-is so that quoted cells survive a write/read cycle unchanged.

A quote that is never closed does not fail the parse: the record is re-read as
one physical line, the line end closes the field, and parsing resumes on the
following line.
"""

__all__ = [
    "parse_records",
    "split_header",
]

QUOTE = '"'
DELIMITER = ","
LINE_BREAKS = "\r\n"


def _finish_field(chars: list[str], quoted_from: int | None, quoted_to: int | None) -> str:
    value = "".join(chars)
    if quoted_from is None or quoted_to is None:
        return value.strip()
    return value[:quoted_from].lstrip() + value[quoted_from:quoted_to] + value[quoted_to:].rstrip()


def _scan_record(text: str, pos: int, single_line: bool) -> tuple[list[str], int, bool]:
    """Scan one record starting at ``pos``.

    Returns (fields, next position, quotes balanced).
    """
    n = len(text)
    fields: list[str] = []
    chars: list[str] = []
    quoted = False
    quoted_from: int | None = None
    quoted_to: int | None = None
    i = pos
    while i < n:
        ch = text[i]
        if quoted:
            if ch == QUOTE:
                if i + 1 < n and text[i + 1] == QUOTE:
                    chars.append(QUOTE)
                    i += 2
                    continue
                quoted = False
                quoted_to = len(chars)
                i += 1
                continue
            if single_line and ch in LINE_BREAKS:
                quoted_to = len(chars)
                break
            chars.append(ch)
            i += 1
            continue
        if ch == QUOTE:
            quoted = True
            if quoted_from is None:
                quoted_from = len(chars)
            i += 1
            continue
        if ch == DELIMITER:
            fields.append(_finish_field(chars, quoted_from, quoted_to))
            chars, quoted_from, quoted_to = [], None, None
            i += 1
            continue
        if ch in LINE_BREAKS:
            break
        chars.append(ch)
        i += 1

    if quoted and quoted_to is None:
        quoted_to = len(chars)
    fields.append(_finish_field(chars, quoted_from, quoted_to))

    # consume the line terminator (\r\n, \n or \r)
    if i < n and text[i] == "\r":
        i += 1
    if i < n and text[i] == "\n":
        i += 1
    return fields, i, not quoted


def _is_blank(source: str) -> bool:
    # raw record text; a line of bare delimiters is still a record
    return not source.strip()


def parse_records(text: str) -> list[list[str]]:
    """Tokenize ``text`` into records, skipping whitespace-only lines."""
    records: list[list[str]] = []
    pos = 0
    n = len(text)
    while pos < n:
        fields, end, balanced = _scan_record(text, pos, single_line=False)
        if not balanced:
            # unterminated quote: fall back to the current physical line only
            fields, end, _ = _scan_record(text, pos, single_line=True)
        if not _is_blank(text[pos:end]):
            records.append(fields)
        pos = end
    return records


def split_header(records: list[list[str]]) -> tuple[list[str], list[list[str]]]:
    """First record becomes the lower-cased header, the rest are data rows."""
    if not records:
        return [], []
    headers = [h.strip().lower() for h in records[0]]
    return headers, records[1:]
