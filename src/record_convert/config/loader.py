"""Utilities for loading record_convert configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..csv2json.remap import FieldRemapConfig
from ..domain.types import OutputFormat
from ..errors import ConfigError
from .schema import AppConfig, ConvertDefaults


def load_config(path: str | Path) -> AppConfig:
    """Load configuration from a YAML file."""

    config_path = Path(path).expanduser().resolve()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw_data = yaml.safe_load(handle) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_data, dict):
        raise ConfigError("Configuration root must be a mapping.")

    base_dir = config_path.parent
    paths_data = raw_data.get("paths") or {}
    if not isinstance(paths_data, dict):
        raise ConfigError("Expected a mapping for paths.")

    return AppConfig(
        defaults=_parse_defaults(raw_data.get("defaults")),
        output_directory=_resolve_directory(paths_data.get("output"), base_dir),
        columns=_parse_columns(raw_data.get("columns")),
        remap=_parse_remap(raw_data.get("remap")),
    )


def _resolve_directory(value: Any, base_dir: Path) -> Optional[Path]:
    if not value:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"paths.output must be a string, got {type(value).__name__}.")
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def _parse_defaults(data: Any) -> ConvertDefaults:
    if not data:
        return ConvertDefaults()
    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping for defaults.")
    try:
        context_window = int(data.get("context_window", 100))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"defaults.context_window must be an integer: {e}") from e
    return ConvertDefaults(
        json_target=_parse_output_format(data.get("json_target")),
        output_suffix=str(data.get("output_suffix") or ""),
        context_window=context_window,
        encoding=str(data.get("encoding") or "utf-8"),
    )


def _parse_output_format(value: Any, default: OutputFormat = OutputFormat.CSV) -> OutputFormat:
    if not value:
        return default
    try:
        return OutputFormat(str(value).lower())
    except ValueError as e:
        raise ConfigError(f"Unknown json_target '{value}', expected 'csv' or 'json'.") from e


def _parse_columns(data: Any) -> Optional[List[str]]:
    if data is None:
        return None
    if not isinstance(data, list):
        raise ConfigError("Expected a list for columns.")
    return [str(value) for value in data]


def _coerce_str_dict(values: Any, name: str) -> Dict[str, str]:
    if not values:
        return {}
    if not isinstance(values, dict):
        raise ConfigError(f"Expected a mapping for {name}.")
    return {str(key): str(val) for key, val in values.items()}


def _parse_replacements(data: Any) -> Dict[str, List[Tuple[str, str]]]:
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping for remap.replacements.")
    replacements: Dict[str, List[Tuple[str, str]]] = {}
    for field_name, pairs in data.items():
        if not isinstance(pairs, list):
            raise ConfigError(f"Replacements for '{field_name}' must be a list of [pattern, replacement].")
        parsed = []
        for pair in pairs:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ConfigError(f"Replacement for '{field_name}' must be a [pattern, replacement] pair.")
            parsed.append((str(pair[0]), str(pair[1])))
        replacements[str(field_name)] = parsed
    return replacements


def _parse_remap(data: Any) -> FieldRemapConfig:
    if not data:
        return FieldRemapConfig()
    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping for remap.")
    return FieldRemapConfig(
        rename=_coerce_str_dict(data.get("rename"), "remap.rename"),
        keep_unmapped=bool(data.get("keep_unmapped", True)),
        unmapped_prefix=str(data.get("unmapped_prefix", "_unmapped_")),
        coerce=_coerce_str_dict(data.get("coerce"), "remap.coerce"),
        replacements=_parse_replacements(data.get("replacements")),
    )


__all__ = ["load_config"]
