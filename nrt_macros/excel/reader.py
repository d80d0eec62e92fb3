from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reading and the in-memory dataset boundary.

The engine addresses cells by 0-based (row, column) and compares cells by
their trimmed display text. Sheets are read with pandas without a header
(header detection belongs to ColumnMapper) and buffered fully in memory
before any scanning starts.
"""

__all__ = [
    "WorksheetNotFoundError",
    "Worksheet",
    "Dataset",
    "cell_text",
    "read_workbook",
]


class WorksheetNotFoundError(KeyError):
    """Raised when a macro references a sheet the workbook does not contain."""

    def __str__(self) -> str:  # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


def cell_text(value: Any) -> str:
    """Display text of a cell value, trimmed.

    Empty cells (None/NaN) render as an empty string, integral floats lose
    their ``.0`` (pandas widens int columns containing blanks to float),
    booleans render as Excel shows them and dates as ISO dates.
    """
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (pd.Timestamp, datetime)):
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


@dataclass(frozen=True)
class Worksheet:
    """Read-only 2-D grid of typed cell values."""
    name: str
    rows: tuple[tuple[Any, ...], ...]

    @classmethod
    def from_rows(cls, name: str, rows: Iterable[Iterable[Any]]) -> Worksheet:
        return cls(name=name, rows=tuple(tuple(r) for r in rows))

    @classmethod
    def from_frame(cls, name: str, df: pd.DataFrame) -> Worksheet:
        # NaN -> None so every empty cell looks the same to the scanners
        cleaned = df.astype(object).where(pd.notna(df), None)
        return cls.from_rows(name, cleaned.values.tolist())

    @property
    def last_row(self) -> int:
        """Index of the last row (-1 for an empty sheet)."""
        return len(self.rows) - 1

    @property
    def last_col(self) -> int:
        return max((len(r) for r in self.rows), default=0) - 1

    def cell(self, row: int, col: int) -> Any:
        if row < 0 or col < 0 or row >= len(self.rows):
            return None
        values = self.rows[row]
        return values[col] if col < len(values) else None

    def text(self, row: int, col: int) -> str:
        return cell_text(self.cell(row, col))


class Dataset(Mapping[str, Worksheet]):
    """Sheet name -> Worksheet, in workbook order. Lifetime: one request."""

    def __init__(self, sheets: Iterable[Worksheet] = ()) -> None:
        self._sheets: dict[str, Worksheet] = {ws.name: ws for ws in sheets}

    @classmethod
    def from_rows(cls, sheets: Mapping[str, Iterable[Iterable[Any]]]) -> Dataset:
        return cls(Worksheet.from_rows(name, rows) for name, rows in sheets.items())

    @property
    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def worksheet(self, name: str) -> Worksheet:
        try:
            return self._sheets[name]
        except KeyError:
            raise WorksheetNotFoundError(f'Worksheet "{name}" not found in workbook') from None

    def __getitem__(self, name: str) -> Worksheet:
        return self._sheets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sheets)

    def __len__(self) -> int:
        return len(self._sheets)


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> Dataset:
    """Read an Excel workbook into a Dataset.

    Parameters
    ----------
    path: Excel file path (.xlsx)
    target_sheets: restrict reading to these sheet names (None = all sheets)
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    sheets: list[Worksheet] = []
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            # Raw grid, no header and no NA-string conversion: "NA" stays text
            df = xls.parse(name, header=None, keep_default_na=False, na_values=[])
            sheets.append(Worksheet.from_frame(str(name), df))
    return Dataset(sheets)
