from __future__ import annotations
from datetime import date, datetime
from pathlib import Path

import pandas as pd
import pytest

from nrt_macros.excel.reader import Dataset, Worksheet, WorksheetNotFoundError, cell_text, read_workbook


def _make_excel(tmp_path: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    p = tmp_path / name
    with pd.ExcelWriter(p) as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


def test_read_workbook_all_sheets(temp_workdir: Path):
    excel = _make_excel(
        temp_workdir, "book.xlsx",
        {
            "NRT Rules": [
                ["Title Row", None],
                ["Key", "Value"],
                [1, "NA"],
                [2.5, "  padded  "],
            ],
            "NRT Sequence": [["AccountType"]],
        },
    )
    ds = read_workbook(excel)
    assert ds.sheet_names == ["NRT Rules", "NRT Sequence"]
    ws = ds.worksheet("NRT Rules")
    assert ws.last_row == 3
    assert ws.text(0, 0) == "Title Row"
    assert ws.text(0, 1) == ""
    assert ws.text(2, 0) == "1"
    assert ws.text(2, 1) == "NA"  # NA strings are kept as text
    assert ws.text(3, 0) == "2.5"
    assert ws.text(3, 1) == "padded"


def test_read_workbook_target_sheets(temp_workdir: Path):
    excel = _make_excel(temp_workdir, "book.xlsx", {"A": [["a"]], "B": [["b"]]})
    ds = read_workbook(excel, target_sheets=["B"])
    assert list(ds) == ["B"]
    assert "A" not in ds


def test_read_workbook_invalid_file(temp_workdir: Path):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"not a zip")
    with pytest.raises(Exception):
        read_workbook(bad)


def test_dataset_missing_worksheet_message():
    ds = Dataset.from_rows({"Present": [["x"]]})
    with pytest.raises(WorksheetNotFoundError) as e:
        ds.worksheet("Absent")
    assert str(e.value) == 'Worksheet "Absent" not found in workbook'
    assert isinstance(e.value, KeyError)


def test_worksheet_out_of_range_cells_are_empty():
    ws = Worksheet.from_rows("S", [["a"], ["b", "c"]])
    assert ws.last_col == 1
    assert ws.cell(0, 1) is None
    assert ws.cell(5, 0) is None
    assert ws.cell(-1, 0) is None
    assert ws.text(0, 9) == ""
    assert Worksheet.from_rows("E", []).last_row == -1


def test_worksheet_from_frame_normalises_nan():
    df = pd.DataFrame([[1.0, float("nan")], ["x", None]])
    ws = Worksheet.from_frame("S", df)
    assert ws.cell(0, 1) is None
    assert ws.cell(1, 1) is None
    assert ws.text(0, 0) == "1"


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        (float("nan"), ""),
        (pd.NaT, ""),
        (True, "TRUE"),
        (False, "FALSE"),
        (3.0, "3"),
        (3.25, "3.25"),
        (7, "7"),
        ("  text ", "text"),
        (datetime(2024, 5, 1), "2024-05-01"),
        (datetime(2024, 5, 1, 13, 30, 5), "2024-05-01 13:30:05"),
        (pd.Timestamp("2024-05-01"), "2024-05-01"),
        (date(2024, 5, 1), "2024-05-01"),
    ],
)
def test_cell_text(value, expected):
    assert cell_text(value) == expected
