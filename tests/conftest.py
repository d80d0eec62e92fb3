# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path

import pytest

from nrt_macros.excel.reader import Dataset
from nrt_macros.logging.init import LOGGER_NAME, reset_logging
from nrt_macros.models.macro_config import MacroConfig

HEADER = ["Rule Id", "Product Line", "Rule Text", "Account Type", "Segment", "Eligible", "Offer Code"]
LOGICAL = ["RuleId", "ProductLine", "RuleText", "AccountType", "Segment", "Eligible", "OfferCode"]

RULE_ROWS = [
    ["NRT Eligibility Rules", "", "", "", "", "", ""],
    HEADER,
    ["R1", "Mobile", "Mobile consumer", "Consumer", "Gold", "Y", "OFF1"],
    ["R2", "Broadband", "BB business", "Business", "Silver", "N", "OFF2"],
    ["R3", "TV", "TV & more", "Consumer", "Bronze", "Y", "OFF3"],
]

SEQUENCE_ROWS = [
    ["AccountType"],
    [""],
    ["AccountType,Segment"],
]

DEFINITION_TEXT = '''# MakeDVMRulesets

```vb
Public Const gcsXLSheet As String = "NRT Rules"
Public Const gcsAllXLFields As String = "Rule Id,Product Line,Rule Text,Account Type,Segment,Eligible,Offer Code"
Public Const gcsAllFields As String = "RuleId,ProductLine,RuleText,AccountType,Segment,Eligible,OfferCode"
Public Const gcsInXLText As String = "Rule Text"
Public Const gcsInXLFilter As String = "Product Line"
Public Const gcsInXLFilterValuesOld As String = "Mobile,%"
Public Const gcsInXLFilterValuesNew As String = "Mobile,Broadband,%"
Public Const gcsInFields As String = "AccountType,Segment"
Public Const gcsInFieldsSeqTab As String = "NRT Sequence"
Public Const gcsOutDVM As String = "NRT Eligibility%"
Public Const gcsOutFile As String = "NRT_Eligibility%"
Public Const gcsOutReturnCode As String = "1000"
Public Const gcsOutBC As String = "DVM Ruleset"
Public Const gcsOutFields As String = "Eligible,OfferCode"
Public Const gcsOutDefault As String = "DVM Ruleset,Status,x,Active|DVM Ruleset,Comments,-,"
Public Const gcbOutLoop As Boolean = False
```
'''


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        (p / "macros").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("NRT_MACROS_DIR", raising=False)
        monkeypatch.delenv("NRT_OUTPUT_DIR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """macros_directory: ./macros
definition_suffix: .md
reserved_definitions: [all]
legacy_release_tokens: ["202109"]
legacy_release_prefixes: ["R1.0"]
wildcard: "%"
output_extension: .xml
default_return_code: "1000"
output_directory: ./out
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "nrt_macros.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_definition(temp_workdir: Path):
    def _write(name: str, text: str = DEFINITION_TEXT) -> Path:
        p = temp_workdir / "macros" / f"{name}.md"
        p.write_text(text, encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def rules_config() -> MacroConfig:
    return MacroConfig(
        xl_sheet="NRT Rules",
        all_xl_fields=",".join(HEADER),
        all_fields=",".join(LOGICAL),
        in_xl_text="Rule Text",
        in_xl_filter="Product Line",
        in_xl_filter_values_old="Mobile,%",
        in_xl_filter_values_new="Mobile,Broadband,%",
        in_fields="AccountType,Segment",
        in_fields_seq_tab="NRT Sequence",
        out_dvm="NRT Eligibility%",
        out_file="NRT_Eligibility%",
        out_return_code="1000",
        out_bc="DVM Ruleset",
        out_fields="Eligible,OfferCode",
        out_default="DVM Ruleset,Status,x,Active|DVM Ruleset,Comments,-,",
    )


@pytest.fixture()
def rules_dataset() -> Dataset:
    return Dataset.from_rows({"NRT Rules": RULE_ROWS, "NRT Sequence": SEQUENCE_ROWS})


@pytest.fixture()
def rule_rows() -> list[list[object]]:
    return [list(r) for r in RULE_ROWS]


@pytest.fixture()
def sequence_rows() -> list[list[object]]:
    return [list(r) for r in SEQUENCE_ROWS]


@pytest.fixture()
def definition_text() -> str:
    return DEFINITION_TEXT
