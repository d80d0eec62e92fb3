from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.macro_config import split_names
from ..models.row_data import FilterSpec, PassAccumulator, RowTriple, ScanResult
from .columns import NOT_FOUND, ColumnMap
from .reader import Worksheet

"""Row scanner: the engine's core iteration.

``scan_next`` is a pure function of (worksheet, cursor, filter): it finds the
first qualifying row at or after the cursor, extracts its (text, inList,
outList) triple and returns the cursor for the next call. ``scan_pass``
folds those calls into a PassAccumulator. Progress is monotonic (the next
cursor is always past the matched row) so a pass ends within the sheet's
row count.
"""

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ","


@dataclass(frozen=True)
class ScanLayout:
    """Column positions a macro needs while scanning one worksheet."""
    columns: ColumnMap
    text_col: int = NOT_FOUND
    filter_col: int = NOT_FOUND  # -1 disables filtering: every row qualifies
    out_cols: tuple[int, ...] = ()
    default_input_fields: tuple[str, ...] = ()

    def input_cols(self, token: str) -> tuple[int, ...]:
        """Input columns for a pass.

        The pass token names the input fields (comma-separated logical names);
        the default empty pass falls back to the declared input fields.
        """
        names = split_names(token) if token.strip() else list(self.default_input_fields)
        return self.columns.resolve_logical(names)


def _joined(worksheet: Worksheet, row: int, cols: Sequence[int]) -> str:
    # unresolved columns are skipped, not rendered as empty slots
    return LIST_SEPARATOR.join(worksheet.text(row, c) for c in cols if c != NOT_FOUND)


def _qualifies(worksheet: Worksheet, row: int, layout: ScanLayout, filter_spec: FilterSpec) -> bool:
    if layout.filter_col == NOT_FOUND:
        return True
    return filter_spec.matches(worksheet.text(row, layout.filter_col))


def scan_next(
    worksheet: Worksheet,
    start_row: int,
    filter_spec: FilterSpec,
    layout: ScanLayout,
    input_cols: Sequence[int] = (),
) -> ScanResult:
    """Find the first qualifying row at or after *start_row*.

    Returns the extracted triple, ``next_row`` (matched row + 1) and
    ``has_more`` which is true only when the matched row is strictly before
    the worksheet's last row. Without a match ``found`` and ``has_more`` are
    false and the triple is empty.
    """
    last_row = worksheet.last_row
    for row in range(max(start_row, 0), last_row + 1):
        if not _qualifies(worksheet, row, layout, filter_spec):
            continue
        text = worksheet.text(row, layout.text_col) if layout.text_col != NOT_FOUND else ""
        triple = RowTriple(
            text=text,
            in_list=_joined(worksheet, row, input_cols),
            out_list=_joined(worksheet, row, layout.out_cols),
        )
        return ScanResult(found=True, row=row, next_row=row + 1, has_more=row < last_row, triple=triple)

    return ScanResult(found=False, row=NOT_FOUND, next_row=last_row + 1, has_more=False)


def scan_pass(
    worksheet: Worksheet,
    start_row: int,
    filter_spec: FilterSpec,
    layout: ScanLayout,
    sequence: int,
    token: str = "",
) -> PassAccumulator:
    """Collect every qualifying row from *start_row* onward for one sequence pass."""
    acc = PassAccumulator(sequence=sequence, token=token)
    input_cols = layout.input_cols(token)
    cursor = start_row
    while True:
        result = scan_next(worksheet, cursor, filter_spec, layout, input_cols)
        # blank rows qualify for exclusion filters but carry no rule
        if result.found and not result.triple.is_empty():
            acc = acc.add(result.triple)
        if not result.has_more:
            break
        cursor = result.next_row
    logger.debug(
        "sheet=%s pass=%d token=%r filter=%s rows=%d",
        worksheet.name,
        sequence,
        token,
        filter_spec.to_expression(),
        len(acc),
    )
    return acc
