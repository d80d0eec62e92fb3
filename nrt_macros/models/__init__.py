"""Domain models for the NRT ruleset macro engine.

This package contains the immutable records passed between the parser,
the worksheet scanners and the document assembler.
"""

from .error_record import ErrorRecord
from .macro_config import MacroConfig, ParsedMacroDefinition
from .macro_result import AutoDetectResult, MacroResult
from .row_data import FilterKind, FilterSpec, PassAccumulator, RowTriple, ScanResult

__all__ = [
    # Configuration models
    "MacroConfig",
    "ParsedMacroDefinition",
    # Scanning models
    "FilterKind",
    "FilterSpec",
    "RowTriple",
    "ScanResult",
    "PassAccumulator",
    # Results
    "MacroResult",
    "AutoDetectResult",
    "ErrorRecord",
]
