"""
MacroRegistry: the store of macro definition documents.

Definitions live as ``<name>.md`` files in one directory. The reserved
aggregate document (``all.md`` by default) concatenates every definition
for human reference and is never listed or executed.

Usage::

    registry = MacroRegistry(Path("macros"))
    for name in registry.list():
        definition = registry.load(name)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..config.loader import EngineSettings
from ..models.macro_config import ParsedMacroDefinition
from .parser import parse_macro_file

logger = logging.getLogger(__name__)


class MacroRegistry:
    def __init__(
        self,
        directory: Path,
        *,
        suffix: str = ".md",
        reserved: Iterable[str] = ("all",),
    ) -> None:
        self.directory = Path(directory)
        self.suffix = suffix
        self._reserved = {r.lower() for r in reserved}

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> MacroRegistry:
        return cls(
            Path(settings.macros_directory),
            suffix=settings.definition_suffix,
            reserved=settings.reserved_definitions,
        )

    # ------------------------------------------------------------------ lookup

    def list(self) -> list[str]:
        """Names of all available definitions, sorted, reserved names excluded.

        An unreadable or missing directory yields an empty list.
        """
        try:
            entries = [p for p in self.directory.iterdir() if p.is_file()]
        except OSError as exc:
            logger.warning("cannot list macro definitions in %s: %s", self.directory, exc)
            return []
        names = {
            p.stem
            for p in entries
            if p.suffix == self.suffix and p.stem.lower() not in self._reserved
        }
        return sorted(names)

    def load(self, name: str) -> ParsedMacroDefinition | None:
        """Parse one definition; I/O failure is reported as not found (None)."""
        path = self.directory / f"{name}{self.suffix}"
        try:
            return parse_macro_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("macro definition %s could not be loaded: %s", name, exc)
            return None

    def __iter__(self) -> Iterator[tuple[str, ParsedMacroDefinition | None]]:
        """Yield (name, definition-or-None) in enumeration order."""
        for name in self.list():
            yield name, self.load(name)

    def __len__(self) -> int:
        return len(self.list())
