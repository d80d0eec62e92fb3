from __future__ import annotations

from dataclasses import dataclass, field

"""Macro definition dataclasses.

MacroConfig is the typed record extracted from one macro-definition document.
Every field defaults to an empty string (or False for the loop flag) so a
partial or malformed definition still produces a complete record; consumers
decide what an empty value means.
"""

__all__ = [
    "MacroConfig",
    "ParsedMacroDefinition",
    "split_names",
]


def split_names(raw: str, sep: str = ",") -> list[str]:
    """Split a delimited declaration into trimmed, non-empty names."""
    return [part.strip() for part in raw.split(sep) if part.strip()]


@dataclass(frozen=True)
class MacroConfig:
    """Configuration constants declared by one macro definition."""
    xl_sheet: str = ""  # Target worksheet name
    all_xl_fields: str = ""  # Source (spreadsheet header) field names, comma-separated
    all_fields: str = ""  # Logical field names, parallel to all_xl_fields
    in_xl_text: str = ""  # Source field holding the rule text
    in_xl_filter: str = ""  # Source field used for partitioning
    in_xl_filter_values_old: str = ""  # Legacy-release partition values
    in_xl_filter_values_new: str = ""  # Current-release partition values
    in_fields: str = ""  # Logical input field names
    in_fields_seq_tab: str = ""  # Sheet holding the sequence table
    out_dvm: str = ""  # Output document name template ('%' placeholder)
    out_file: str = ""  # Output file name template ('%' placeholder)
    out_return_code: str = ""
    out_bc: str = ""  # Output container (business component) name
    out_fields: str = ""  # Logical output field names
    out_default: str = ""  # Default-value specification
    out_loop: bool = False

    @property
    def source_fields(self) -> list[str]:
        return split_names(self.all_xl_fields)

    @property
    def logical_fields(self) -> list[str]:
        return split_names(self.all_fields)

    @property
    def input_fields(self) -> list[str]:
        return split_names(self.in_fields)

    @property
    def output_fields(self) -> list[str]:
        return split_names(self.out_fields)


@dataclass(frozen=True)
class ParsedMacroDefinition:
    """A named definition document together with its extracted config."""
    name: str  # Document stem, e.g. "MakeDVMRulesets"
    config: MacroConfig = field(default_factory=MacroConfig)
    source: str = ""  # Raw document text, kept for preview/diagnostics
