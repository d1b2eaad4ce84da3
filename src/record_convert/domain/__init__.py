"""Record domain models and enumerations."""

from .models import RESERVED_COLUMNS, FieldValue, Record, RecordCollection, as_field_map, field_kind
from .types import FieldKind, InputFormat, OutputFormat, ScanState

__all__ = [
    "FieldKind",
    "FieldValue",
    "InputFormat",
    "OutputFormat",
    "RESERVED_COLUMNS",
    "Record",
    "RecordCollection",
    "ScanState",
    "as_field_map",
    "field_kind",
]
