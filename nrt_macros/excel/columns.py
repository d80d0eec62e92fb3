from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .reader import Worksheet

"""Header detection and field -> column resolution.

The header row is found by scanning column 0 for the first declared source
field name; title or metadata rows above it are tolerated without an
explicit header-row parameter. When the anchor is absent row 0 is assumed.
Every declared field then resolves to its column index in that row, or -1.
"""

NOT_FOUND = -1


@dataclass(frozen=True)
class ColumnMap:
    """Resolved column positions for one worksheet.

    ``source_fields`` are the spreadsheet header names, ``logical_fields``
    the parallel names used by input/output declarations; ``indices[i]``
    belongs to both ``source_fields[i]`` and ``logical_fields[i]``.
    """
    header_row: int
    source_fields: tuple[str, ...]
    logical_fields: tuple[str, ...]
    indices: tuple[int, ...]

    def by_source(self, name: str) -> int:
        """Column of a spreadsheet header name, or -1."""
        name = name.strip()
        if name in self.source_fields:
            return self.indices[self.source_fields.index(name)]
        return NOT_FOUND

    def by_logical(self, name: str) -> int:
        """Column of a logical field name, or -1."""
        name = name.strip()
        if name in self.logical_fields:
            pos = self.logical_fields.index(name)
            # logical list may be longer than the source list
            return self.indices[pos] if pos < len(self.indices) else NOT_FOUND
        return NOT_FOUND

    def resolve_logical(self, names: Sequence[str]) -> tuple[int, ...]:
        return tuple(self.by_logical(n) for n in names)


def find_header_row(worksheet: Worksheet, anchor: str) -> int:
    """First row whose column-0 text equals *anchor*; 0 when none does."""
    anchor = anchor.strip()
    if not anchor:
        return 0
    for row in range(worksheet.last_row + 1):
        if worksheet.text(row, 0) == anchor:
            return row
    return 0


def map_columns(
    source_fields: Sequence[str],
    logical_fields: Sequence[str],
    worksheet: Worksheet,
) -> ColumnMap:
    """Resolve every declared source field to a column index (or -1)."""
    sources = tuple(f.strip() for f in source_fields)
    header_row = find_header_row(worksheet, sources[0]) if sources else 0

    header = [worksheet.text(header_row, col) for col in range(worksheet.last_col + 1)]
    indices: list[int] = []
    for field_name in sources:
        # leftmost match wins when a header name repeats
        indices.append(header.index(field_name) if field_name in header else NOT_FOUND)

    return ColumnMap(
        header_row=header_row,
        source_fields=sources,
        logical_fields=tuple(f.strip() for f in logical_fields),
        indices=tuple(indices),
    )
