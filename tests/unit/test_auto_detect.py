from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from nrt_macros.excel.reader import Dataset
from nrt_macros.logging.error_log import ErrorLogBuffer
from nrt_macros.macros.registry import MacroRegistry
from nrt_macros.services.auto_detect import auto_detect_and_execute


def test_runs_applicable_and_skips_others(temp_workdir: Path, write_definition, definition_text, rules_dataset):
    write_definition("MakeDVMRulesets")
    write_definition("NoSheet", 'gcsOutFile = "x%"')
    write_definition("OtherSheet", definition_text.replace('"NRT Rules"', '"Pricing"'))
    write_definition("all", definition_text)
    registry = MacroRegistry(temp_workdir / "macros")

    result = auto_detect_and_execute(rules_dataset, "R2.1", registry)

    assert result.executed_macros == ["MakeDVMRulesets"]
    assert result.skipped_macros == [
        "NoSheet (no target sheet configured)",
        'OtherSheet (sheet not found: "Pricing")',
    ]
    assert len(result.all_results) == 3
    assert all(r.macro_name == "MakeDVMRulesets" for r in result.all_results)
    assert not result.failures


def test_undecodable_definition_is_skipped(temp_workdir: Path, rules_dataset):
    (temp_workdir / "macros" / "Broken.md").write_bytes(b"\xff\xfe\xfa")
    registry = MacroRegistry(temp_workdir / "macros")
    result = auto_detect_and_execute(rules_dataset, "R2.1", registry)
    assert result.skipped_macros == ["Broken (definition not found)"]
    assert result.all_results == []


def test_failed_macro_does_not_stop_siblings(temp_workdir: Path, write_definition, definition_text, rules_dataset):
    write_definition("A_NoOutput", definition_text.replace('"NRT_Eligibility%"', '""'))
    write_definition("B_Good")
    registry = MacroRegistry(temp_workdir / "macros")
    error_log = ErrorLogBuffer()

    result = auto_detect_and_execute(rules_dataset, "R2.1", registry, error_log=error_log)

    assert result.executed_macros == ["A_NoOutput", "B_Good"]
    assert result.all_results[0].success is False
    assert result.all_results[0].macro_name == "A_NoOutput"
    assert len(result.successes) == 3
    assert not result.all_failed
    (record,) = error_log.records
    assert record.macro == "A_NoOutput"
    assert record.sheet == "NRT Rules"
    assert record.error_type == "MACRO_EXECUTION_ERROR"


def test_unexpected_exception_is_contained(temp_workdir: Path, write_definition, rules_dataset):
    write_definition("First")
    write_definition("Second")
    registry = MacroRegistry(temp_workdir / "macros")

    from nrt_macros.services.executor import execute_macro as real_execute

    def side_effect(config, dataset, release, settings, macro_name=""):
        if macro_name == "First":
            raise RuntimeError("boom")
        return real_execute(config, dataset, release, settings, macro_name=macro_name)

    with patch("nrt_macros.services.auto_detect.execute_macro", side_effect=side_effect):
        result = auto_detect_and_execute(rules_dataset, "R2.1", registry)

    assert result.all_results[0].error == "Error executing macro First: boom"
    assert "First (execution error)" in result.skipped_macros
    assert result.executed_macros == ["Second"]
    assert len(result.successes) == 3


def test_empty_registry(temp_workdir: Path):
    registry = MacroRegistry(temp_workdir / "macros")
    result = auto_detect_and_execute(Dataset(), "R2.1", registry)
    assert result.all_results == []
    assert result.executed_macros == []
    assert result.skipped_macros == []
