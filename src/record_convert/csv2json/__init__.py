"""
CSV <-> JSON Record Converter
=============================
Converts record-store exports between the API's JSON payload and a
readable CSV table.

Components:
- Cell codec (split_row, escape_cell)
- Record shape transform (to_csv, from_csv, to_json)
- Field remapping (remap_fields)
- Biconverter (RecordConverter)
"""

from .codec import escape_cell, join_fields, split_lines, split_row, stringify_value
from .converter import (
    RecordConverter,
    convert_file,
    convert_files,
    convert_text,
    derive_output_path,
    detect_format,
    strip_byte_order_mark,
)
from .models import (
    BatchReport,
    ConversionIssue,
    ConversionResult,
    ConversionStats,
    ConvertedDocument,
    ConvertOptions,
)
from .remap import FieldRemapConfig, RemapResult, remap_fields, remap_record
from .transform import (
    build_field_set,
    build_header,
    from_csv,
    records_from_id_map,
    records_from_payload,
    to_csv,
    to_json,
)

__all__ = [
    # Codec
    "escape_cell",
    "join_fields",
    "split_lines",
    "split_row",
    "stringify_value",
    # Transform
    "build_field_set",
    "build_header",
    "from_csv",
    "records_from_id_map",
    "records_from_payload",
    "to_csv",
    "to_json",
    # Remap
    "FieldRemapConfig",
    "RemapResult",
    "remap_fields",
    "remap_record",
    # Converter
    "RecordConverter",
    "convert_file",
    "convert_files",
    "convert_text",
    "derive_output_path",
    "detect_format",
    "strip_byte_order_mark",
    # Data classes
    "BatchReport",
    "ConversionIssue",
    "ConversionResult",
    "ConversionStats",
    "ConvertedDocument",
    "ConvertOptions",
]
