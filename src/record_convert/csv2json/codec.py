"""Quote-aware CSV cell codec.

Only comma-delimited, double-quote-escaped fields are supported. Multi-line
text is kept on one CSV line by substituting `` | `` for each newline;
``transform.from_csv`` turns the separator back into newlines.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List

from ..domain.models import field_kind
from ..domain.types import FieldKind

DELIMITER = ","
QUOTE = '"'
NEWLINE_SEPARATOR = " | "

_QUOTE_TRIGGERS = (DELIMITER, QUOTE, "\n", "\r")


def split_row(line: str) -> List[str]:
    """Split one CSV line into cells.

    A doubled quote inside a quoted section yields one literal quote. The
    final cell is kept when it is non-empty or when an earlier cell was
    already pushed, so an empty line gives ``[]`` and ``"a,"`` gives
    ``["a", ""]``.
    """
    cells: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    if current or cells:
        cells.append("".join(current))
    return cells


def stringify_value(value: Any) -> str:
    """Textual form of a field value as written into a CSV cell."""
    kind = field_kind(value)
    if kind is FieldKind.NULL:
        return ""
    if kind is FieldKind.STRING:
        return value
    if kind is FieldKind.LIST:
        return json.dumps(list(value), ensure_ascii=False, separators=(",", ":"))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    # numbers, booleans and maps share JSON's own spelling
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def escape_cell(value: Any) -> str:
    """Serialize a value into one CSV cell."""
    text = stringify_value(value).replace("\n", NEWLINE_SEPARATOR)
    if any(trigger in text for trigger in _QUOTE_TRIGGERS):
        text = QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def join_fields(cells: Iterable[str]) -> str:
    """Join already-escaped cells into one CSV line."""
    return DELIMITER.join(cells)


def split_lines(text: str) -> List[str]:
    """Split a document into non-blank lines, dropping a trailing ``\\r``."""
    lines = []
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line.strip():
            lines.append(line)
    return lines


__all__ = [
    "DELIMITER",
    "NEWLINE_SEPARATOR",
    "QUOTE",
    "escape_cell",
    "join_fields",
    "split_lines",
    "split_row",
    "stringify_value",
]
