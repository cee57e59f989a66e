"""In-memory implementation of SheetStore (no remote backend)."""

import threading

from invitees.infrastructure.a1 import A1Range, parse_a1


def _trim_row(row: list[str]) -> list[str]:
    end = len(row)
    while end and not row[end - 1]:
        end -= 1
    return row[:end]


class InMemorySheetStore:
    """Holds sheets as lists of string rows. Reads mimic the Sheets API:
    trailing empty cells and trailing empty rows are omitted.
    """

    def __init__(
        self,
        sheets: dict[str, list[list[str]]] | None = None,
        *,
        spreadsheet_url: str = "http://localhost/sheets/in-memory",
    ) -> None:
        self._sheets: dict[str, list[list[str]]] = {
            name: [list(row) for row in rows] for name, rows in (sheets or {}).items()
        }
        self._url = spreadsheet_url
        self._lock = threading.Lock()

    @property
    def spreadsheet_url(self) -> str:
        return self._url

    def rows(self, sheet: str) -> list[list[str]]:
        """Copy of every stored row of a sheet."""
        with self._lock:
            return [list(row) for row in self._sheets.get(sheet, [])]

    def read_range(self, a1_range: str) -> list[list[str]]:
        rng = parse_a1(a1_range)
        with self._lock:
            rows = self._sheets.get(rng.sheet, [])
            start = rng.first_row or 0
            stop = len(rows) if rng.last_row is None else rng.last_row + 1
            out = [
                _trim_row(row[rng.first_col : rng.last_col + 1])
                for row in rows[start:stop]
            ]
        while out and not out[-1]:
            out.pop()
        return out

    def append_rows(self, a1_range: str, rows: list[list[str]]) -> None:
        rng = parse_a1(a1_range)
        with self._lock:
            sheet = self._sheets.setdefault(rng.sheet, [])
            while sheet and not _trim_row(sheet[-1]):
                sheet.pop()
            for values in rows:
                sheet.append([""] * rng.first_col + [str(v) for v in values])

    def update_range(self, a1_range: str, rows: list[list[str]]) -> None:
        rng = parse_a1(a1_range)
        with self._lock:
            sheet = self._sheets.setdefault(rng.sheet, [])
            for offset, values in enumerate(rows):
                self._write_row(sheet, rng, (rng.first_row or 0) + offset, values)

    @staticmethod
    def _write_row(sheet: list[list[str]], rng: A1Range, index: int, values: list[str]) -> None:
        while len(sheet) <= index:
            sheet.append([])
        row = sheet[index]
        needed = rng.first_col + len(values)
        if len(row) < needed:
            row.extend([""] * (needed - len(row)))
        for col, value in enumerate(values):
            row[rng.first_col + col] = str(value)
