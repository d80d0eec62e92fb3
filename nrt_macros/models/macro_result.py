from __future__ import annotations

from dataclasses import dataclass, field

"""Result models for macro execution and auto-detection.

MacroResult is produced once per (macro definition x filter partition), or
once per failed macro. AutoDetectResult aggregates them in registry order.
"""


@dataclass(frozen=True)
class MacroResult:
    """One produced output document (or one failed macro execution)."""
    xml_content: str
    file_name: str
    success: bool
    error: str | None = None
    macro_name: str = ""  # Definition that produced the result (informational)

    @classmethod
    def failure(cls, message: str, macro_name: str = "") -> MacroResult:
        return cls(xml_content="", file_name="", success=False, error=message, macro_name=macro_name)


@dataclass(frozen=True)
class AutoDetectResult:
    """All results from every applicable definition for one workbook."""
    all_results: list[MacroResult] = field(default_factory=list)
    executed_macros: list[str] = field(default_factory=list)
    skipped_macros: list[str] = field(default_factory=list)  # "name (reason)"

    @property
    def successes(self) -> list[MacroResult]:
        return [r for r in self.all_results if r.success]

    @property
    def failures(self) -> list[MacroResult]:
        return [r for r in self.all_results if not r.success]

    @property
    def all_failed(self) -> bool:
        """True when results exist but none of them succeeded."""
        return bool(self.all_results) and not self.successes
