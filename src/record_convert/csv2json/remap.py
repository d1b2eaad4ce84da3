"""Field renaming and value normalisation for converted records.

Exports sometimes come back with column names shifted against their
values. A rename map ``old name -> new name`` fixes the names; per-field
coercions and regex replacements then tidy the values.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import FieldValue, Record, RecordCollection
from ..errors import ConfigError

logger = logging.getLogger(__name__)

COERCIONS = ("int", "float", "str", "strip")

# leading signed digits; trailing text is ignored ("5+" -> 5)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(slots=True)
class FieldRemapConfig:
    """How to rename and normalise record fields."""

    rename: Dict[str, str] = field(default_factory=dict)
    keep_unmapped: bool = True
    unmapped_prefix: str = "_unmapped_"
    coerce: Dict[str, str] = field(default_factory=dict)
    replacements: Dict[str, List[Tuple[str, str]]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name, kind in self.coerce.items():
            if kind not in COERCIONS:
                raise ConfigError(
                    f"Unknown coercion '{kind}' for field '{name}'; expected one of {', '.join(COERCIONS)}"
                )
        for name, pairs in self.replacements.items():
            for pattern, _ in pairs:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise ConfigError(f"Invalid replacement pattern for field '{name}': {e}") from e


@dataclass
class RemapResult:
    """Remapped records plus the names that had no mapping."""

    records: RecordCollection
    unmapped: List[str] = field(default_factory=list)


def coerce_value(value: FieldValue, kind: str) -> Optional[FieldValue]:
    """Apply a named coercion. Empty values become ``None`` (dropped)."""
    if value is None or value == "":
        return None
    if kind == "str":
        return value if isinstance(value, str) else str(value)
    if kind == "strip":
        return value.strip() if isinstance(value, str) else value
    if isinstance(value, bool):
        return value
    if kind == "int":
        if isinstance(value, int):
            return value
        match = _LEADING_INT.match(str(value))
        return int(match.group(1)) if match else value
    if kind == "float":
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(str(value).strip())
        except ValueError:
            return value
    return value


def apply_replacements(value: FieldValue, pairs: List[Tuple[str, str]]) -> FieldValue:
    if not isinstance(value, str):
        return value
    for pattern, replacement in pairs:
        value = re.sub(pattern, replacement, value, flags=re.IGNORECASE)
    return value.strip()


def remap_record(record: Record, config: FieldRemapConfig, unmapped: Optional[List[str]] = None) -> Record:
    """Return a copy of ``record`` with renamed and normalised fields."""
    fields: Dict[str, Any] = {}
    for old_name, value in record.fields.items():
        new_name = config.rename.get(old_name)
        if new_name is None:
            if unmapped is not None and old_name not in unmapped:
                logger.warning(f'Unmapped field: "{old_name}"')
                unmapped.append(old_name)
            if not config.keep_unmapped:
                continue
            fields[f"{config.unmapped_prefix}{old_name}"] = value
            continue

        if new_name in config.replacements:
            value = apply_replacements(value, config.replacements[new_name])
        if new_name in config.coerce:
            value = coerce_value(value, config.coerce[new_name])
            if value is None:
                continue
        fields[new_name] = value

    return Record(id=record.id, created_time=record.created_time, fields=fields)


def remap_fields(records: RecordCollection, config: FieldRemapConfig) -> RemapResult:
    """Apply ``config`` to every record in the collection."""
    unmapped: List[str] = []
    remapped = RecordCollection([remap_record(record, config, unmapped) for record in records])
    logger.info(f"Remapped {len(remapped)} records ({len(unmapped)} unmapped field names)")
    return RemapResult(records=remapped, unmapped=unmapped)


__all__ = ["COERCIONS", "FieldRemapConfig", "RemapResult", "apply_replacements", "coerce_value", "remap_fields", "remap_record"]
