from __future__ import annotations

from .reader import Dataset

"""Sequence table reader.

The sequence sheet lists one token per row in column 0; each token drives
one sequence pass. An absent sheet is not an error: it yields an empty
sequence, which the executor runs as a single pass with an empty token.
"""

SEQUENCE_SEPARATOR = ";"


def read_sequence(dataset: Dataset, sheet_name: str) -> str:
    """Non-empty trimmed column-0 values of *sheet_name*, joined with ';'."""
    if not sheet_name or sheet_name not in dataset:
        return ""
    ws = dataset[sheet_name]
    values = [ws.text(row, 0) for row in range(ws.last_row + 1)]
    return SEQUENCE_SEPARATOR.join(v for v in values if v)


def sequence_tokens(sequence: str) -> list[str]:
    """Pass tokens for a joined sequence; at least one (empty) token."""
    return sequence.split(SEQUENCE_SEPARATOR) if sequence else [""]
