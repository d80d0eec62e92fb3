from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Structured record for one failed macro execution, serialised as a JSON Lines
entry with a fixed key set. ``partition`` is empty when the failure happened
before any partition was processed.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        macro: Macro definition name
        sheet: Target worksheet declared by the definition
        partition: Filter partition value ('' for macro-level errors)
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Exception message
    """
    timestamp: str  # ISO8601 UTC
    macro: str
    sheet: str
    partition: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(macro: str, sheet: str, partition: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            macro=macro,
            sheet=sheet,
            partition=partition,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to a single JSON line without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
