"""Tests for the in-memory SheetStore and A1 range parsing."""

import pytest

from invitees.infrastructure import InMemorySheetStore
from invitees.infrastructure.a1 import column_index, parse_a1


def test_column_index():
    assert column_index("A") == 0
    assert column_index("E") == 4
    assert column_index("Z") == 25
    assert column_index("AA") == 26


def test_parse_a1_columns_and_cells():
    rng = parse_a1("Invitees!C:D")
    assert (rng.sheet, rng.first_col, rng.last_col, rng.first_row, rng.last_row) == (
        "Invitees", 2, 3, None, None,
    )
    rng = parse_a1("'My Sheet'!A1:E1")
    assert (rng.sheet, rng.first_col, rng.last_col, rng.first_row, rng.last_row) == (
        "My Sheet", 0, 4, 0, 0,
    )


@pytest.mark.parametrize("bad", ["A:A", "!A:A", "Sheet!1:2", "Sheet!A-B"])
def test_parse_a1_rejects_unsupported(bad):
    with pytest.raises(ValueError):
        parse_a1(bad)


def test_read_column_slice_and_trailing_trim():
    store = InMemorySheetStore(
        {"S": [["id", "name", "email", "phone"], ["1", "A", "a@x.io", ""], ["2", "B"]]}
    )
    assert store.read_range("S!C:D") == [["email", "phone"], ["a@x.io"]]
    assert store.read_range("S!A:A") == [["id"], ["1"], ["2"]]


def test_read_missing_sheet_is_empty():
    assert InMemorySheetStore().read_range("Nope!A:E") == []


def test_append_goes_after_last_populated_row():
    store = InMemorySheetStore({"S": [["h"], ["1"], [], []]})
    store.append_rows("S!A:E", [["2", "x"]])
    assert store.rows("S") == [["h"], ["1"], ["2", "x"]]


def test_update_overwrites_fixed_range():
    store = InMemorySheetStore({"S": [["old", "row", "kept", "", "", "extra"]]})
    store.update_range("S!A1:E1", [["ID", "Name", "Email", "Phone Number", "Date & Time"]])
    assert store.rows("S") == [["ID", "Name", "Email", "Phone Number", "Date & Time", "extra"]]


def test_rows_returns_a_copy():
    store = InMemorySheetStore({"S": [["a"]]})
    store.rows("S")[0].append("mutated")
    assert store.rows("S") == [["a"]]
