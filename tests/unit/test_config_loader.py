from __future__ import annotations
import pytest
from pathlib import Path
from nrt_macros.config.loader import ConfigError, EngineSettings, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.macros_directory == "./macros"
    assert cfg.reserved_definitions == ("all",)
    assert cfg.wildcard == "%"
    assert cfg.default_return_code == "1000"


def test_load_config_defaults_for_omitted_keys(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "nrt_macros.yml"
    cfg_path.write_text("output_directory: ./build\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    assert cfg.output_directory == "./build"
    assert cfg.macros_directory == EngineSettings().macros_directory
    assert cfg.legacy_release_prefixes == ("R1.0",)


def test_load_config_empty_file_is_all_defaults(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "nrt_macros.yml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_config(cfg_path) == EngineSettings()


def test_load_config_integer_return_code(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace('default_return_code: "1000"', "default_return_code: 2000")
    write_config.write_text(text, encoding="utf-8")
    assert load_config(write_config).default_return_code == "2000"


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError):
        load_config(missing)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("macros_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_not_a_mapping(write_config: Path):
    write_config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("reserved_definitions: [all]", "reserved_definitions: all")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_env_overrides_file_values(write_config: Path, monkeypatch):
    monkeypatch.setenv("NRT_MACROS_DIR", "/srv/macros")
    monkeypatch.setenv("NRT_OUTPUT_DIR", "/srv/out")
    cfg = load_config(write_config)
    assert cfg.macros_directory == "/srv/macros"
    assert cfg.output_directory == "/srv/out"


@pytest.mark.parametrize(
    "release,legacy",
    [("202109", True), ("R1.0", True), ("R1.0-beta", True), ("R2.1", False), ("R1.1", False), ("", False)],
)
def test_is_legacy_release(release: str, legacy: bool):
    assert EngineSettings().is_legacy_release(release) is legacy
