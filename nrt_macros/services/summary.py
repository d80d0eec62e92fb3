from __future__ import annotations

from ..models.macro_result import AutoDetectResult

"""SUMMARY line rendering for one auto-detection run."""


def render_summary_line(total_macros: int, result: AutoDetectResult) -> str:
    """Render the SUMMARY line for an AutoDetectResult.

    Format:
    SUMMARY macros={executed}/{registered} skipped={skipped}
    documents={successful results} failed={failed results}

    Examples:
        >>> from nrt_macros.models.macro_result import AutoDetectResult, MacroResult
        >>> r = AutoDetectResult(
        ...     all_results=[MacroResult("<x/>", "a.xml", True)],
        ...     executed_macros=["A"], skipped_macros=["B (sheet not found)"],
        ... )
        >>> render_summary_line(2, r)
        'SUMMARY macros=1/2 skipped=1 documents=1 failed=0'
    """
    return (
        f"SUMMARY macros={len(result.executed_macros)}/{total_macros} "
        f"skipped={len(result.skipped_macros)} "
        f"documents={len(result.successes)} "
        f"failed={len(result.failures)}"
    )
