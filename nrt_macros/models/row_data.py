from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Row-level scanning models.

FilterSpec decides whether a worksheet row belongs to a partition, RowTriple
is the unit extracted from one matching row, and ScanResult/PassAccumulator
carry the state of one sequence pass between RowScanner calls.
"""

__all__ = [
    "FilterKind",
    "FilterSpec",
    "RowTriple",
    "ScanResult",
    "PassAccumulator",
]


class FilterKind(Enum):
    """How a FilterSpec compares the filter cell.

    - EXACT: row qualifies only when the cell equals the single value
    - EXCLUDE: row qualifies unless the cell equals one of the values
    """
    EXACT = "="
    EXCLUDE = "!"


@dataclass(frozen=True)
class FilterSpec:
    """Partition predicate applied to the trimmed text of the filter column."""
    kind: FilterKind
    values: tuple[str, ...] = ()

    @classmethod
    def exact(cls, value: str) -> FilterSpec:
        return cls(FilterKind.EXACT, (value.strip(),))

    @classmethod
    def exclude(cls, values: list[str] | tuple[str, ...]) -> FilterSpec:
        return cls(FilterKind.EXCLUDE, tuple(v.strip() for v in values))

    def matches(self, cell_text: str) -> bool:
        text = cell_text.strip()
        if self.kind is FilterKind.EXACT:
            return text == (self.values[0] if self.values else "")
        return text not in self.values

    def to_expression(self) -> str:
        return self.kind.value + ",".join(self.values)


@dataclass(frozen=True)
class RowTriple:
    """(text, inList, outList) extracted from one matching row."""
    text: str = ""
    in_list: str = ""  # comma-joined input field values
    out_list: str = ""  # comma-joined output field values

    def is_empty(self) -> bool:
        return not (self.text or self.in_list or self.out_list)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one RowScanner call.

    ``row`` is the matched 0-based row index (-1 when nothing matched) and
    ``next_row`` is where the following call must resume.
    """
    found: bool
    row: int
    next_row: int
    has_more: bool
    triple: RowTriple = RowTriple()


@dataclass(frozen=True)
class PassAccumulator:
    """Rows collected during one sequence pass, in worksheet order."""
    sequence: int  # 1-based pass number
    token: str = ""
    triples: tuple[RowTriple, ...] = ()

    def add(self, triple: RowTriple) -> PassAccumulator:
        return PassAccumulator(self.sequence, self.token, self.triples + (triple,))

    def __len__(self) -> int:
        return len(self.triples)
