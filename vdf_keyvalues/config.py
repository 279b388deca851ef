"""Parser configuration with YAML + env vars + CLI override support."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class TokenizerConfig:
    disable_escape: bool = False
    escape_policy: str = "strict"  # strict | passthrough
    require_complete: bool = True


@dataclass
class AggregatorConfig:
    use_latest_value: bool = False


@dataclass
class DiagnosticsConfig:
    verbose: bool = False
    track_position: bool = True
    debug_buffer_size: int = 20


@dataclass
class SourceConfig:
    encoding: str = "utf-8"
    chunk_size: int = 65536
    timeout: float = 30.0


@dataclass
class OutputConfig:
    format: str = "json"  # json | pairs
    indent: int = 2


@dataclass
class AppConfig:
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    aggregator: AggregatorConfig = field(default_factory=AggregatorConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# Mapping: env var name -> (section, field)
_ENV_MAPPING: dict[str, tuple[str, str]] = {
    "VDF_DISABLE_ESCAPE": ("tokenizer", "disable_escape"),
    "VDF_ESCAPE_POLICY": ("tokenizer", "escape_policy"),
    "VDF_REQUIRE_COMPLETE": ("tokenizer", "require_complete"),
    "VDF_USE_LATEST_VALUE": ("aggregator", "use_latest_value"),
    "VDF_VERBOSE": ("diagnostics", "verbose"),
    "VDF_TRACK_POSITION": ("diagnostics", "track_position"),
    "VDF_DEBUG_BUFFER_SIZE": ("diagnostics", "debug_buffer_size"),
    "VDF_ENCODING": ("source", "encoding"),
    "VDF_CHUNK_SIZE": ("source", "chunk_size"),
    "VDF_TIMEOUT": ("source", "timeout"),
    "VDF_OUTPUT_FORMAT": ("output", "format"),
    "VDF_OUTPUT_INDENT": ("output", "indent"),
}


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load configuration with priority: YAML < env vars < CLI overrides.

    Args:
        config_path: Path to YAML config file. None to skip.
        cli_overrides: Dict of CLI overrides in format {"section.field": value}.
            None values are skipped (means CLI option was not provided).
    """
    config = AppConfig()

    if config_path:
        _apply_yaml(config, config_path)

    _apply_env_vars(config)

    if cli_overrides:
        _apply_overrides(config, cli_overrides)

    return config


def _apply_yaml(config: AppConfig, config_path: str) -> None:
    """Load YAML file and apply values to config."""
    path = Path(config_path)
    if not path.is_file():
        logger.warning("Config file not found: %s, using defaults", config_path)
        return

    try:
        import yaml
    except ImportError:
        logger.error("pyyaml not installed. Install with: pip install pyyaml")
        return

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("Config file is not a valid YAML mapping: %s", config_path)
        return

    for section_name, section_data in data.items():
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name, None)
        if section is None:
            logger.debug("Unknown config section: %s", section_name)
            continue
        _set_section_fields(section, section_data)

    logger.info("Loaded config from %s", config_path)


def _apply_env_vars(config: AppConfig) -> None:
    for env_name, (section_name, field_name) in _ENV_MAPPING.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        _set_field_value(getattr(config, section_name), field_name, value)


def _apply_overrides(config: AppConfig, overrides: dict[str, Any]) -> None:
    """Apply CLI overrides in format {'section.field': value}."""
    for key, value in overrides.items():
        if value is None:
            continue
        parts = key.split(".", 1)
        if len(parts) != 2:
            continue
        section_name, field_name = parts
        section = getattr(config, section_name, None)
        if section is None:
            continue
        _set_field_value(section, field_name, value)


def _set_section_fields(section: Any, data: dict[str, Any]) -> None:
    section_fields = {f.name for f in fields(section)}
    for key, value in data.items():
        if key in section_fields and value is not None:
            _set_field_value(section, key, value)
        elif key not in section_fields:
            logger.debug("Unknown config field: %s", key)


def _set_field_value(obj: Any, field_name: str, value: Any) -> None:
    """Set a field on a dataclass, coercing the value to the correct type."""
    field_info = {f.name: f for f in fields(obj)}.get(field_name)
    if field_info is None:
        return

    coerced = _coerce_value(value, field_info.type)
    object.__setattr__(obj, field_name, coerced)


def _coerce_value(value: Any, type_hint: str | type | None) -> Any:
    """Coerce a value to match the target type hint."""
    if value is None:
        return None

    type_str = str(type_hint) if type_hint else ""

    if "bool" in type_str:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)

    if "int" in type_str:
        return int(value)

    if "float" in type_str:
        return float(value)

    return value
