"""
record_convert

Repair malformed JSON exports from a records API and convert them
losslessly to and from a human-editable CSV table.

Architecture:
    raw text -> Sanitizer -> JSON parse -> Record Shape Transform -> CSV / id-keyed JSON
    CSV text -> Cell Codec -> Record Shape Transform -> id-keyed JSON
"""

import logging

from .version import __version__

from .csv2json import (
    ConvertOptions,
    RecordConverter,
    convert_file,
    convert_text,
    escape_cell,
    from_csv,
    split_row,
    to_csv,
    to_json,
)
from .domain import Record, RecordCollection
from .errors import (
    EmptySourceError,
    MalformedJsonError,
    MissingIdColumnError,
    MissingInputError,
    RecordConvertError,
    UnreadableFileError,
)
from .repair import sanitize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Repair
    "sanitize",
    # Codec and transform
    "escape_cell",
    "split_row",
    "from_csv",
    "to_csv",
    "to_json",
    # Converter
    "ConvertOptions",
    "RecordConverter",
    "convert_file",
    "convert_text",
    # Models
    "Record",
    "RecordCollection",
    # Errors
    "EmptySourceError",
    "MalformedJsonError",
    "MissingIdColumnError",
    "MissingInputError",
    "RecordConvertError",
    "UnreadableFileError",
]
