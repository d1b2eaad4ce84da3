"""Record shape transform between the JSON record map and the CSV table.

JSON side (API payload)::

    {"records": [{"id": "rec1", "createdTime": "...", "fields": {...}}, ...]}

JSON side (id-keyed output)::

    {"rec1": {"createdTime": "...", "fields": {...}}, ...}

CSV side: header ``id,createdTime,<sorted field names>`` and one row per
record.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence

from ..domain.models import Record, RecordCollection, as_field_map
from ..errors import EmptySourceError, MissingIdColumnError, UnsupportedFieldValueError
from .codec import NEWLINE_SEPARATOR, escape_cell, join_fields, split_lines, split_row

logger = logging.getLogger(__name__)

ID_COLUMN = "id"
CREATED_TIME_COLUMN = "createdTime"


def records_from_payload(data: Any, warnings: Optional[List[str]] = None) -> RecordCollection:
    """Build a collection from a ``{"records": [...]}`` API payload.

    Raises:
        EmptySourceError: If ``records`` is absent, not a list, or empty.
    """
    records = data.get("records") if isinstance(data, dict) else None
    if not isinstance(records, list) or not records:
        raise EmptySourceError("No records found in the data")

    collection = RecordCollection()
    for index, entry in enumerate(records):
        if not isinstance(entry, dict) or not entry.get("id"):
            _warn(warnings, f"Record {index}: missing 'id', skipping")
            continue
        collection.add(
            Record(
                id=str(entry["id"]),
                created_time=str(entry.get("createdTime") or ""),
                fields=as_field_map(entry.get("fields")),
            )
        )

    if not collection:
        raise EmptySourceError("No records with an 'id' found in the data")
    return collection


def records_from_id_map(data: Any) -> RecordCollection:
    """Build a collection from the id-keyed output shape."""
    if not isinstance(data, dict) or not data:
        raise EmptySourceError("No records found in the data")

    collection = RecordCollection()
    for record_id, entry in data.items():
        if not isinstance(entry, dict):
            raise UnsupportedFieldValueError(f"Record {record_id!r} must be an object")
        collection.add(
            Record(
                id=str(record_id),
                created_time=str(entry.get("createdTime") or ""),
                fields=as_field_map(entry.get("fields")),
            )
        )
    return collection


def build_field_set(records: RecordCollection) -> List[str]:
    """Return the sorted union of field names, excluding the fixed columns."""
    return records.field_set()


def build_header(records: RecordCollection) -> List[str]:
    return [ID_COLUMN, CREATED_TIME_COLUMN, *build_field_set(records)]


def to_rows(records: RecordCollection, header: Optional[Sequence[str]] = None) -> List[List[str]]:
    """Return escaped cells for the header and every record."""
    header = list(header) if header is not None else build_header(records)
    rows = [[escape_cell(name) for name in header]]
    for record in records:
        row = []
        for column in header:
            if column == ID_COLUMN:
                row.append(escape_cell(record.id))
            elif column == CREATED_TIME_COLUMN:
                row.append(escape_cell(record.created_time))
            else:
                row.append(escape_cell(record.fields.get(column)))
        rows.append(row)
    return rows


def to_csv(records: RecordCollection) -> str:
    """Serialize records as CSV text (no trailing newline)."""
    return "\n".join(join_fields(row) for row in to_rows(records))


def to_json(records: RecordCollection) -> str:
    """Serialize records in the id-keyed shape with two-space indentation."""
    return json.dumps(records.to_dict(), indent=2, ensure_ascii=False)


def from_csv(
    text: str,
    columns: Optional[Sequence[str]] = None,
    warnings: Optional[List[str]] = None,
) -> RecordCollection:
    """Parse CSV text into a record collection.

    Args:
        text: CSV document; the first non-blank line is the header row.
        columns: Optional fixed column-to-field map (names by position)
            used instead of the header row's names.
        warnings: Optional list collecting non-fatal row problems.

    Raises:
        EmptySourceError: If there is no data row.
        MissingIdColumnError: If no column is named ``id``.
    """
    lines = split_lines(text)
    if len(lines) < 2:
        raise EmptySourceError("CSV file has no data rows")

    header = list(columns) if columns is not None else split_row(lines[0])
    if ID_COLUMN not in header:
        raise MissingIdColumnError(header)
    id_index = header.index(ID_COLUMN)
    created_index = header.index(CREATED_TIME_COLUMN) if CREATED_TIME_COLUMN in header else -1

    collection = RecordCollection()
    for row_number, line in enumerate(lines[1:], start=2):
        cells = split_row(line)
        record_id = _cell(cells, id_index)
        if not record_id:
            _warn(warnings, f"Row {row_number}: empty id, skipping")
            continue
        if len(cells) > len(header):
            _warn(warnings, f"Row {row_number}: {len(cells) - len(header)} cell(s) beyond the header ignored")

        fields = {}
        for index, name in enumerate(header):
            if index in (id_index, created_index):
                continue
            value = _cell(cells, index)
            if value:
                fields[name] = value.replace(NEWLINE_SEPARATOR, "\n")

        collection.add(
            Record(
                id=record_id,
                created_time=_cell(cells, created_index) if created_index >= 0 else "",
                fields=fields,
            )
        )

    if not collection:
        raise EmptySourceError("CSV file has no rows with an id")
    return collection


def _cell(cells: Sequence[str], index: int) -> str:
    if 0 <= index < len(cells):
        return cells[index]
    return ""


def _warn(warnings: Optional[List[str]], message: str) -> None:
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)


__all__ = [
    "CREATED_TIME_COLUMN",
    "ID_COLUMN",
    "build_field_set",
    "build_header",
    "from_csv",
    "records_from_id_map",
    "records_from_payload",
    "to_csv",
    "to_json",
    "to_rows",
]
