"""Domain enumerations for record conversion."""

from enum import Enum


class InputFormat(str, Enum):
    """Format sniffed from the first non-whitespace character of a document."""

    JSON = "json"
    CSV = "csv"


class OutputFormat(str, Enum):
    """Serialization target of a conversion."""

    JSON = "json"
    CSV = "csv"

    @property
    def extension(self) -> str:
        return f".{self.value}"


class FieldKind(str, Enum):
    """Closed set of shapes a record field value may take."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    LIST = "list"
    MAP = "map"


class ScanState(Enum):
    """Sanitizer scanner state."""

    OUTSIDE = "outside"      # Between JSON tokens
    IN_STRING = "in_string"  # Inside a string literal
