from __future__ import annotations

import logging

from ..config.loader import EngineSettings
from ..excel.reader import Dataset
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..macros.registry import MacroRegistry
from ..models.macro_result import AutoDetectResult, MacroResult
from .executor import execute_macro
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Auto-detection: run every registered macro whose target sheet is present.

Definitions are processed in registry enumeration order; results keep that
order, then partition order within a macro. A definition without a target
sheet, or whose sheet the workbook lacks, is skipped with the reason
recorded. A failing definition contributes one failed MacroResult and never
stops the others.
"""

SKIP_NOT_LOADED = "definition not found"
SKIP_NO_SHEET_CONFIG = "no target sheet configured"
SKIP_SHEET_NOT_FOUND = "sheet not found"


def _record_failures(
    error_log: ErrorLogBuffer | None,
    macro_name: str,
    sheet: str,
    results: list[MacroResult],
) -> None:
    for r in results:
        if r.success:
            continue
        logger.error("macro %s failed: %s", macro_name, r.error)
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(
                    macro=macro_name,
                    sheet=sheet,
                    partition="",
                    error_type="MACRO_EXECUTION_ERROR",
                    message=r.error or "",
                )
            )


def auto_detect_and_execute(
    dataset: Dataset,
    release: str,
    registry: MacroRegistry,
    settings: EngineSettings | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> AutoDetectResult:
    """Execute all applicable macro definitions against one workbook.

    Args:
        dataset: Uploaded workbook
        release: Release identifier passed through to every execution
        registry: Store of macro definitions
        settings: Engine constants (defaults when omitted)
        error_log: Optional buffer receiving one record per failed macro

    Returns:
        AutoDetectResult with every MacroResult plus executed/skipped names
    """
    settings = settings or EngineSettings()
    result = AutoDetectResult()
    names = registry.list()

    with ProgressTracker(len(names), description="Running macros") as progress:
        for name in names:
            progress.start_macro(name)
            definition = registry.load(name)

            if definition is None:
                result.skipped_macros.append(f"{name} ({SKIP_NOT_LOADED})")
                logger.info("skip macro=%s reason=%s", name, SKIP_NOT_LOADED)
                progress.finish_macro(executed=False)
                continue

            target_sheet = definition.config.xl_sheet
            if not target_sheet:
                result.skipped_macros.append(f"{name} ({SKIP_NO_SHEET_CONFIG})")
                logger.info("skip macro=%s reason=%s", name, SKIP_NO_SHEET_CONFIG)
                progress.finish_macro(executed=False)
                continue

            if target_sheet not in dataset:
                result.skipped_macros.append(f'{name} ({SKIP_SHEET_NOT_FOUND}: "{target_sheet}")')
                logger.info("skip macro=%s reason=%s sheet=%s", name, SKIP_SHEET_NOT_FOUND, target_sheet)
                progress.finish_macro(executed=False)
                continue

            try:
                macro_results = execute_macro(
                    definition.config, dataset, release, settings, macro_name=name
                )
            except Exception as e:
                # execute_macro reports failures as data; this guards the boundary
                macro_results = [MacroResult.failure(f"Error executing macro {name}: {e}", macro_name=name)]
                result.skipped_macros.append(f"{name} (execution error)")
            else:
                result.executed_macros.append(name)

            _record_failures(error_log, name, target_sheet, macro_results)
            result.all_results.extend(macro_results)
            logger.info(
                "macro=%s sheet=%s documents=%d failed=%d",
                name,
                target_sheet,
                sum(1 for r in macro_results if r.success),
                sum(1 for r in macro_results if not r.success),
            )
            progress.finish_macro(executed=True)
            progress.set_postfix(documents=len(result.successes), failed=len(result.failures))

    return result
