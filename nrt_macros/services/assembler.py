from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..models.row_data import PassAccumulator

"""DVM ruleset document assembly.

A document is built in four steps: open (root + container), optional loop
wrapper, one <List> block per sequence pass, close. Each step is a pure
function returning a text fragment; ``assemble_document`` concatenates them.

Produced shape::

    <?xml version="1.0" encoding="UTF-8"?>
    <SiebelMessage MessageId="" MessageType="Integration Object" IntObjectName="...">
      <IntObject>
        <BusinessComponent Name="...">
          <List>
            <ReturnCode>1000</ReturnCode>
            <Sequence>1</Sequence>
            <Status>Active</Status>
            <Rules>
              <Rule>
                <Text>...</Text>
                <InList>...</InList>
                <OutList>...</OutList>
              </Rule>
            </Rules>
          </List>
        </BusinessComponent>
      </IntObject>
    </SiebelMessage>
"""

logger = logging.getLogger(__name__)

__all__ = [
    "DefaultValue",
    "escape_markup",
    "parse_default_values",
    "open_document",
    "add_loop",
    "add_list",
    "close_document",
    "assemble_document",
]

LOOP_FIELD = "Loop"
SUPPRESS_MARKER = "-"

# element names emitted from the default-value string; no namespaces
_ELEMENT_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class DefaultValue:
    """One ``container,fieldName,marker,value`` group of a default spec."""
    container: str
    field: str
    marker: str
    value: str

    @property
    def emitted(self) -> bool:
        if not self.field or self.marker == SUPPRESS_MARKER:
            return False
        return self.literal not in ("", SUPPRESS_MARKER)

    @property
    def literal(self) -> str:
        """Emitted text: the 4th element, or the marker when the 4th is absent."""
        return self.value or self.marker


def escape_markup(value: Any) -> str:
    """Replace the five reserved markup characters; None renders as ''."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def parse_default_values(spec: str) -> list[DefaultValue]:
    """Parse ``BC,Field,x,Value|BC,Field2,-,`` into DefaultValue entries.

    Groups with fewer than three elements carry no marker and are dropped;
    so are groups whose field is not a usable element name.
    """
    defaults: list[DefaultValue] = []
    for group in spec.split("|"):
        parts = [p.strip() for p in group.split(",")]
        if len(parts) < 3:
            continue
        if parts[1] and not _ELEMENT_NAME.match(parts[1]):
            logger.warning("default value skipped: invalid element name %r", parts[1])
            continue
        defaults.append(
            DefaultValue(
                container=parts[0],
                field=parts[1],
                marker=parts[2],
                value=parts[3] if len(parts) > 3 else "",
            )
        )
    return defaults


def open_document(document_name: str, container: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<SiebelMessage MessageId="" MessageType="Integration Object" '
        f'IntObjectName="{escape_markup(document_name)}">\n'
        "  <IntObject>\n"
        f'    <BusinessComponent Name="{escape_markup(container)}">'
    )


def add_loop() -> str:
    return "\n      <Loop>"


def add_list(
    return_code: str,
    defaults: Iterable[DefaultValue],
    accumulator: PassAccumulator,
) -> str:
    """One <List> block: return code, 1-based sequence, defaults, rules."""
    parts = [
        "\n      <List>",
        f"\n        <ReturnCode>{escape_markup(return_code)}</ReturnCode>",
        f"\n        <Sequence>{accumulator.sequence}</Sequence>",
    ]
    for d in defaults:
        if d.emitted:
            parts.append(f"\n        <{d.field}>{escape_markup(d.literal)}</{d.field}>")

    # A pass without matches still emits its list block, just without <Rules>
    if accumulator.triples:
        parts.append("\n        <Rules>")
        for triple in accumulator.triples:
            parts.append(
                "\n          <Rule>"
                f"\n            <Text>{escape_markup(triple.text)}</Text>"
                f"\n            <InList>{escape_markup(triple.in_list)}</InList>"
                f"\n            <OutList>{escape_markup(triple.out_list)}</OutList>"
                "\n          </Rule>"
            )
        parts.append("\n        </Rules>")

    parts.append("\n      </List>")
    return "".join(parts)


def close_document(fields: str, loop: bool = False) -> str:
    """Closing tags. *fields* records the consumed field names (informational)."""
    logger.debug("closing document fields=%s", fields)
    closing = "\n      </Loop>" if loop else ""
    return closing + "\n    </BusinessComponent>\n  </IntObject>\n</SiebelMessage>"


def assemble_document(
    document_name: str,
    container: str,
    return_code: str,
    default_spec: str,
    passes: Iterable[PassAccumulator],
    *,
    loop: bool = False,
    input_fields: str = "",
) -> str:
    """Build the complete document text for one partition."""
    defaults = parse_default_values(default_spec)
    xml = open_document(document_name, container)
    fields = input_fields
    if loop:
        xml += add_loop()
        fields += "," + LOOP_FIELD
    for acc in passes:
        xml += add_list(return_code, defaults, acc)
    xml += close_document(fields, loop=loop)
    return xml
