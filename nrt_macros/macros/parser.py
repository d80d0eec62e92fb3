from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..models.macro_config import MacroConfig, ParsedMacroDefinition

"""Macro definition parser.

A definition document is free text (a markdown file wrapping the original
VBA module) containing constant declarations such as::

    Public Const gcsXLSheet As String = "NRT Rules"
    Public Const gcbOutLoop As Boolean = True

The recognised constant names and the MacroConfig field each one feeds are
data (DECLARATION_SCHEMA); a single pass over the text extracts every
declaration and the schema decides which ones matter. Unknown names are
ignored and missing ones leave the field at its default, so parsing never
fails.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "DeclarationKind",
    "Declaration",
    "DECLARATION_SCHEMA",
    "parse_macro_definition",
    "parse_macro_file",
]


class DeclarationKind(Enum):
    STRING = "string"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Declaration:
    """One entry of the name table: constant name -> MacroConfig field."""
    name: str
    target: str  # MacroConfig attribute
    kind: DeclarationKind = DeclarationKind.STRING
    alias: bool = False  # aliases only apply when the canonical name is absent


_S = DeclarationKind.STRING
_B = DeclarationKind.BOOLEAN

DECLARATION_SCHEMA: tuple[Declaration, ...] = (
    Declaration("gcsXLSheet", "xl_sheet"),
    Declaration("gcsAllXLFields", "all_xl_fields"),
    Declaration("gcsAllFields", "all_fields"),
    Declaration("gcsInXLText", "in_xl_text"),
    Declaration("gcsInXLFilter", "in_xl_filter"),
    Declaration("gcsInXLFilterValuesOld", "in_xl_filter_values_old"),
    Declaration("gcsInXLFilterValuesNew", "in_xl_filter_values_new"),
    Declaration("gcsInFields", "in_fields"),
    Declaration("gcsInFieldsSeqTab", "in_fields_seq_tab"),
    Declaration("gcsOutDVM", "out_dvm"),
    Declaration("gcsOutFile", "out_file"),
    Declaration("gcsOutReturnCode", "out_return_code"),
    Declaration("gcsOutBC", "out_bc"),
    Declaration("gcsOutFields", "out_fields"),
    Declaration("gcsOutDefault", "out_default"),
    Declaration("gcbOutLoop", "out_loop", _B),
    # Definitions written before the legacy/current filter split
    Declaration("gcsInXLFilterValues", "in_xl_filter_values_new", _S, alias=True),
    Declaration("gcbLoop", "out_loop", _B, alias=True),
)

# `[Public|Private|Global] [Const] <NAME> [As String] = "<value>"`, one per line
_STRING_PATTERN = re.compile(
    r'^[ \t]*(?:(?:Public|Private|Global|Dim)[ \t]+)?(?:Const[ \t]+)?(\w+)(?:[ \t]+As[ \t]+String)?[ \t]*=[ \t]*"([^"\r\n]*)"',
    re.IGNORECASE | re.MULTILINE,
)
# `[Public|Private|Global] [Const] <NAME> [As Boolean] = True|False`, one per line
_BOOL_PATTERN = re.compile(
    r"^[ \t]*(?:(?:Public|Private|Global|Dim)[ \t]+)?(?:Const[ \t]+)?(\w+)(?:[ \t]+As[ \t]+Boolean)?[ \t]*=[ \t]*(True|False)\b",
    re.IGNORECASE | re.MULTILINE,
)


def _scan(text: str) -> tuple[dict[str, str], dict[str, bool]]:
    """Collect every declaration in *text*; a later declaration overrides an earlier one."""
    strings: dict[str, str] = {}
    booleans: dict[str, bool] = {}
    for m in _STRING_PATTERN.finditer(text):
        strings[m.group(1).lower()] = m.group(2)
    for m in _BOOL_PATTERN.finditer(text):
        booleans[m.group(1).lower()] = m.group(2).lower() == "true"
    return strings, booleans


def parse_macro_definition(text: str, name: str = "") -> ParsedMacroDefinition:
    """Extract a MacroConfig from the raw text of a definition document."""
    strings, booleans = _scan(text or "")
    values: dict[str, object] = {}
    for decl in DECLARATION_SCHEMA:
        if decl.alias and decl.target in values:
            continue
        key = decl.name.lower()
        if decl.kind is DeclarationKind.STRING and key in strings:
            values[decl.target] = strings[key]
        elif decl.kind is DeclarationKind.BOOLEAN and key in booleans:
            values[decl.target] = booleans[key]

    logger.debug("parsed definition=%s recognised=%s", name, sorted(values))
    return ParsedMacroDefinition(name=name, config=MacroConfig(**values), source=text or "")  # type: ignore[arg-type]


def parse_macro_file(path: Path) -> ParsedMacroDefinition:
    """Read and parse a definition document; the file stem is the macro name.

    I/O errors propagate; MacroRegistry.load converts them to "not found".
    """
    content = path.read_text(encoding="utf-8")
    return parse_macro_definition(content, name=path.stem)
