from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config.loader import EngineSettings
from ..excel.columns import map_columns
from ..excel.reader import Dataset
from ..excel.scanner import ScanLayout, scan_pass
from ..excel.sequence import read_sequence, sequence_tokens
from ..models.macro_config import MacroConfig
from ..models.macro_result import MacroResult
from ..models.row_data import FilterSpec
from .assembler import assemble_document

logger = logging.getLogger(__name__)

"""Macro execution for one definition applied to one dataset.

One MacroResult is produced per filter partition, in declaration order. Any
exception while preparing or building the documents aborts this macro only
and comes back as a single failed MacroResult; nothing is raised to the
caller.
"""

__all__ = [
    "MacroExecutionError",
    "Partition",
    "select_filter_values",
    "build_partitions",
    "execute_macro",
]

TEMPLATE_PLACEHOLDER = "%"


class MacroExecutionError(Exception):
    """A definition is too incomplete to produce any document."""
    pass


@dataclass(frozen=True)
class Partition:
    """One output document's slice of the worksheet."""
    value: str  # declared partition value (the wildcard for the catch-all)
    suffix: str  # substituted into the name templates: "-value" or ""
    filter: FilterSpec


def select_filter_values(config: MacroConfig, release: str, settings: EngineSettings) -> str:
    """Legacy filter-value set for legacy releases, current set otherwise."""
    if settings.is_legacy_release(release):
        return config.in_xl_filter_values_old
    return config.in_xl_filter_values_new


def build_partitions(filter_values: str, wildcard: str = "%") -> list[Partition]:
    """Turn a comma-separated value set into partitions.

    The wildcard value becomes an exclusion of every other declared value
    with an empty suffix; any other value is an exact match suffixed
    ``-value``. An empty set yields a single unfiltered catch-all partition.
    """
    values = [v.strip() for v in filter_values.split(",") if v.strip()]
    if not values:
        return [Partition(value=wildcard, suffix="", filter=FilterSpec.exclude([]))]

    others = [v for v in values if v != wildcard]
    partitions: list[Partition] = []
    for value in values:
        if value == wildcard:
            partitions.append(Partition(value=value, suffix="", filter=FilterSpec.exclude(others)))
        else:
            partitions.append(Partition(value=value, suffix=f"-{value}", filter=FilterSpec.exact(value)))
    return partitions


def _substitute(template: str, suffix: str) -> str:
    return template.replace(TEMPLATE_PLACEHOLDER, suffix, 1)


def _build_results(
    config: MacroConfig,
    dataset: Dataset,
    release: str,
    settings: EngineSettings,
    macro_name: str,
) -> list[MacroResult]:
    if not config.out_file:
        raise MacroExecutionError("no output file template configured")

    worksheet = dataset.worksheet(config.xl_sheet)

    columns = map_columns(config.source_fields, config.logical_fields, worksheet)
    layout = ScanLayout(
        columns=columns,
        text_col=columns.by_source(config.in_xl_text),
        filter_col=columns.by_source(config.in_xl_filter),
        out_cols=columns.resolve_logical(config.output_fields),
        default_input_fields=tuple(config.input_fields),
    )
    logger.debug(
        "macro=%s sheet=%s header_row=%d columns=%s text_col=%d filter_col=%d",
        macro_name,
        worksheet.name,
        columns.header_row,
        dict(zip(columns.source_fields, columns.indices)),
        layout.text_col,
        layout.filter_col,
    )

    tokens = sequence_tokens(read_sequence(dataset, config.in_fields_seq_tab))
    partitions = build_partitions(select_filter_values(config, release, settings), settings.wildcard)
    return_code = config.out_return_code or settings.default_return_code
    first_data_row = columns.header_row + 1

    results: list[MacroResult] = []
    for partition in partitions:
        passes = [
            scan_pass(worksheet, first_data_row, partition.filter, layout, sequence=i + 1, token=token)
            for i, token in enumerate(tokens)
        ]
        xml = assemble_document(
            _substitute(config.out_dvm, partition.suffix),
            config.out_bc,
            return_code,
            config.out_default,
            passes,
            loop=config.out_loop,
            input_fields=config.in_fields,
        )
        file_name = _substitute(config.out_file, partition.suffix) + settings.output_extension
        logger.debug(
            "macro=%s partition=%s file=%s rules=%d",
            macro_name,
            partition.value,
            file_name,
            sum(len(p) for p in passes),
        )
        results.append(MacroResult(xml_content=xml, file_name=file_name, success=True, macro_name=macro_name))
    return results


def execute_macro(
    config: MacroConfig,
    dataset: Dataset,
    release: str,
    settings: EngineSettings | None = None,
    *,
    macro_name: str = "",
) -> list[MacroResult]:
    """Run one macro definition against *dataset*.

    Args:
        config: Parsed definition constants
        dataset: Workbook sheets, fully buffered
        release: Release identifier selecting the legacy or current filter set
        settings: Engine constants (defaults when omitted)
        macro_name: Used for result attribution and logging only

    Returns:
        One successful MacroResult per partition, or a single failed
        MacroResult carrying the error text.
    """
    settings = settings or EngineSettings()
    try:
        return _build_results(config, dataset, release, settings, macro_name)
    except Exception as e:
        logger.debug("macro=%s failed: %s", macro_name, e, exc_info=True)
        return [MacroResult.failure(str(e), macro_name=macro_name)]
