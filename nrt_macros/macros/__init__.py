"""Macro definition parsing and the definition store."""

from .parser import DECLARATION_SCHEMA, parse_macro_definition, parse_macro_file
from .registry import MacroRegistry

__all__ = [
    "DECLARATION_SCHEMA",
    "parse_macro_definition",
    "parse_macro_file",
    "MacroRegistry",
]
