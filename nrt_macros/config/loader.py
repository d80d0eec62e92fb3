from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Engine configuration loader.

Responsibilities:
- Load the YAML engine config (default: config/nrt_macros.yml)
- Validate it against the bundled JSON schema
- Apply defaults for every key the file omits
- Apply environment overrides (NRT_MACROS_DIR, NRT_OUTPUT_DIR)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/nrt_macros.yml")

ENV_MACROS_DIR = "NRT_MACROS_DIR"
ENV_OUTPUT_DIR = "NRT_OUTPUT_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class EngineSettings:
    """Engine-wide constants shared by the registry, executor and CLI."""
    macros_directory: str = "./macros"
    definition_suffix: str = ".md"
    reserved_definitions: tuple[str, ...] = ("all",)  # aggregate document(s), never executed
    legacy_release_tokens: tuple[str, ...] = ("202109",)
    legacy_release_prefixes: tuple[str, ...] = ("R1.0",)
    wildcard: str = "%"
    output_extension: str = ".xml"
    default_return_code: str = "1000"
    output_directory: str = "./out"

    def is_legacy_release(self, release: str) -> bool:
        """True when *release* selects the legacy filter-value set."""
        if release in self.legacy_release_tokens:
            return True
        return any(release.startswith(p) for p in self.legacy_release_prefixes)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (unknown keys, wrong types).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def settings_from_dict(data: dict[str, Any]) -> EngineSettings:
    """Build EngineSettings from an already validated mapping."""
    defaults = EngineSettings()
    return EngineSettings(
        macros_directory=data.get("macros_directory", defaults.macros_directory),
        definition_suffix=data.get("definition_suffix", defaults.definition_suffix),
        reserved_definitions=tuple(data.get("reserved_definitions", defaults.reserved_definitions)),
        legacy_release_tokens=tuple(data.get("legacy_release_tokens", defaults.legacy_release_tokens)),
        legacy_release_prefixes=tuple(
            data.get("legacy_release_prefixes", defaults.legacy_release_prefixes)
        ),
        wildcard=data.get("wildcard", defaults.wildcard),
        output_extension=data.get("output_extension", defaults.output_extension),
        default_return_code=str(data.get("default_return_code", defaults.default_return_code)),
        output_directory=data.get("output_directory", defaults.output_directory),
    )


def apply_env_overrides(settings: EngineSettings) -> EngineSettings:
    """Environment variables take precedence over file values."""
    overrides: dict[str, Any] = {}
    macros_dir = os.getenv(ENV_MACROS_DIR)
    if macros_dir:
        overrides["macros_directory"] = macros_dir
    output_dir = os.getenv(ENV_OUTPUT_DIR)
    if output_dir:
        overrides["output_directory"] = output_dir
    return replace(settings, **overrides) if overrides else settings


def load_config(path: Path) -> EngineSettings:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return apply_env_overrides(settings_from_dict(data))
