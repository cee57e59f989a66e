"""A1 range notation ("Sheet!C:D", "Sheet!A1:E1") parsed into zero-based bounds."""

import re
from dataclasses import dataclass

_CELL = re.compile(r"^([A-Z]+)(\d*)$")


@dataclass(frozen=True)
class A1Range:
    sheet: str
    first_col: int
    last_col: int
    first_row: int | None = None
    last_row: int | None = None


def column_index(letters: str) -> int:
    """Zero-based index of a column label: A is 0, AA is 26."""
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def parse_a1(a1_range: str) -> A1Range:
    sheet, sep, cells = a1_range.rpartition("!")
    if not sep or not sheet:
        raise ValueError(f"Range must name a sheet: {a1_range!r}")
    sheet = sheet.strip("'")
    start, _, end = cells.upper().partition(":")
    end = end or start
    m_start = _CELL.match(start)
    m_end = _CELL.match(end)
    if not m_start or not m_end:
        raise ValueError(f"Unsupported A1 range: {a1_range!r}")
    first_row = int(m_start.group(2)) - 1 if m_start.group(2) else None
    last_row = int(m_end.group(2)) - 1 if m_end.group(2) else None
    return A1Range(
        sheet=sheet,
        first_col=column_index(m_start.group(1)),
        last_col=column_index(m_end.group(1)),
        first_row=first_row,
        last_row=last_row,
    )
