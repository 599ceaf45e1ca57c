"""
Small CSV parser for uploaded soil datasets.

Quote-aware (commas inside double quotes, ``""`` as an escaped quote) and
deliberately permissive: short lines are padded, long lines truncated to the
header width and headers are never validated.
"""

import re
from typing import Dict, List

RawRow = Dict[str, str]

_LINE_BREAK = re.compile(r"\r?\n")


def split_csv_line(line: str) -> List[str]:
    """Split one CSV line into trimmed fields."""
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current))
    return [f.strip() for f in fields]


def parse_csv(text: str) -> List[RawRow]:
    """
    Parse CSV text into rows of header -> value.

    Blank lines are dropped. Returns an empty list when fewer than two
    non-blank lines remain (no header plus data line).
    """
    if not text:
        return []

    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
    if len(lines) < 2:
        return []

    headers = split_csv_line(lines[0])
    rows = []
    for line in lines[1:]:
        cols = split_csv_line(line)
        row = {}
        for i, header in enumerate(headers):
            row[header] = cols[i] if i < len(cols) else ""
        rows.append(row)
    return rows
