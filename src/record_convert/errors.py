"""Exception hierarchy for record conversion.

Every exception carries a stable ``code`` that is copied onto the
``ConversionIssue`` recorded when a file fails inside a batch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .repair.diagnostics import ParseFailureContext


class RecordConvertError(Exception):
    """Base class for all conversion failures."""

    code = "CONVERSION_ERROR"
    level = logging.ERROR


class MissingInputError(RecordConvertError):
    """Raised when no input file path was supplied."""

    code = "MISSING_INPUT"


class UnreadableFileError(RecordConvertError):
    """Raised when an input file cannot be read."""

    code = "UNREADABLE_FILE"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class EmptySourceError(RecordConvertError):
    """Raised when a document holds no records (or no CSV data rows)."""

    code = "EMPTY_SOURCE"
    level = logging.WARNING


class MissingIdColumnError(RecordConvertError):
    """Raised when a CSV header row has no ``id`` column."""

    code = "MISSING_ID_COLUMN"

    def __init__(self, header: Optional[list] = None):
        super().__init__("CSV missing 'id' column")
        self.header = header or []


class MalformedJsonError(RecordConvertError):
    """Raised when sanitized text still fails strict JSON parsing."""

    code = "MALFORMED_JSON"

    def __init__(self, message: str, context: Optional["ParseFailureContext"] = None):
        super().__init__(message)
        self.context = context

    @property
    def position(self) -> Optional[int]:
        return self.context.position if self.context else None


class UnsupportedFieldValueError(RecordConvertError):
    """Raised when a field value falls outside the closed JSON value set."""

    code = "UNSUPPORTED_VALUE"


class ConfigError(RecordConvertError):
    """Raised when a YAML configuration file has an invalid shape."""

    code = "CONFIG_ERROR"


__all__ = [
    "ConfigError",
    "EmptySourceError",
    "MalformedJsonError",
    "MissingIdColumnError",
    "MissingInputError",
    "RecordConvertError",
    "UnreadableFileError",
    "UnsupportedFieldValueError",
]
