"""Worksheet access: dataset boundary, header mapping, sequence table and row scanning."""

from .columns import ColumnMap, find_header_row, map_columns
from .reader import Dataset, Worksheet, WorksheetNotFoundError, cell_text, read_workbook
from .scanner import ScanLayout, scan_next, scan_pass
from .sequence import read_sequence, sequence_tokens

__all__ = [
    "ColumnMap",
    "find_header_row",
    "map_columns",
    "Dataset",
    "Worksheet",
    "WorksheetNotFoundError",
    "cell_text",
    "read_workbook",
    "ScanLayout",
    "scan_next",
    "scan_pass",
    "read_sequence",
    "sequence_tokens",
]
