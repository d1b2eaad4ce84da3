"""Record models shared by the JSON and CSV sides of a conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from ..errors import UnsupportedFieldValueError
from .types import FieldKind

FieldValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]

# Columns that live on the record itself rather than in its field map
RESERVED_COLUMNS = ("id", "createdTime")


def field_kind(value: Any) -> FieldKind:
    """Classify a field value into the closed set of JSON value shapes.

    Raises:
        UnsupportedFieldValueError: If the value is not a JSON value.
    """
    # bool before number: bool is an int subclass
    if value is None:
        return FieldKind.NULL
    if isinstance(value, bool):
        return FieldKind.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldKind.NUMBER
    if isinstance(value, str):
        return FieldKind.STRING
    if isinstance(value, (list, tuple)):
        return FieldKind.LIST
    if isinstance(value, dict):
        return FieldKind.MAP
    raise UnsupportedFieldValueError(
        f"Unsupported field value of type {type(value).__name__}: {value!r}"
    )


@dataclass(frozen=True)
class Record:
    """One identifier-keyed entry of the source dataset."""

    id: str
    created_time: str = ""
    fields: Dict[str, FieldValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"createdTime": self.created_time, "fields": dict(self.fields)}


class RecordCollection:
    """Records keyed by id, iterated in insertion order.

    Adding a record whose id is already present replaces the earlier record
    in place, so output order follows the first occurrence of each id.
    """

    def __init__(self, records: Optional[List[Record]] = None):
        self._records: Dict[str, Record] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: Record) -> None:
        self._records[record.id] = record

    def get(self, record_id: str) -> Optional[Record]:
        return self._records.get(record_id)

    def ids(self) -> List[str]:
        return list(self._records)

    def field_set(self) -> List[str]:
        """Sorted union of field names across all records."""
        names = set()
        for record in self._records.values():
            names.update(record.fields)
        return sorted(name for name in names if name not in RESERVED_COLUMNS)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Return the id-keyed output shape."""
        return {record_id: record.to_dict() for record_id, record in self._records.items()}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records.values())

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordCollection):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"RecordCollection({len(self)} records)"


def as_field_map(fields: Any) -> Dict[str, FieldValue]:
    """Validate a decoded ``fields`` object and return it as a plain dict."""
    if fields is None:
        return {}
    if not isinstance(fields, Mapping):
        raise UnsupportedFieldValueError(
            f"Record fields must be an object, got {type(fields).__name__}"
        )
    for value in fields.values():
        field_kind(value)
    return {str(name): value for name, value in fields.items()}
