"""
Record Export Biconverter
=========================
Converts record-store exports between the API's JSON payload and a
human-editable CSV table.

JSON input (first non-whitespace character ``{``) is sanitized, parsed and
written as CSV, or as id-keyed JSON when the JSON target is selected. Any
other input is read as CSV and written as id-keyed JSON.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..domain.types import InputFormat, OutputFormat
from ..errors import RecordConvertError, UnreadableFileError
from ..repair.diagnostics import parse_sanitized
from ..repair.sanitizer import sanitize_with_report
from .models import (
    BatchReport,
    ConversionIssue,
    ConversionResult,
    ConversionStats,
    ConvertedDocument,
    ConvertOptions,
)
from .transform import build_header, from_csv, records_from_payload, to_csv, to_json

logger = logging.getLogger(__name__)

ContentReader = Callable[[Path], str]
ContentWriter = Callable[[Path, str], None]

BYTE_ORDER_MARK = "\ufeff"
FALLBACK_SUFFIX = "_converted"
PREVIEW_IDS = 3
SKIP_MARKER = ", skipping"


def strip_byte_order_mark(text: str) -> str:
    """Drop a leading UTF-8 byte order mark left in by the reader."""
    if text.startswith(BYTE_ORDER_MARK):
        return text[len(BYTE_ORDER_MARK):]
    return text


def detect_format(text: str) -> InputFormat:
    """Sniff the input format from the first non-whitespace character."""
    stripped = strip_byte_order_mark(text.lstrip()).lstrip()
    if stripped.startswith("{"):
        return InputFormat.JSON
    return InputFormat.CSV


def derive_output_path(
    input_path: Union[str, Path],
    output_format: OutputFormat,
    suffix: str = "",
    output_dir: Optional[Path] = None,
) -> Path:
    """Compute the output path: same stem, extension replaced.

    ``suffix`` is inserted before the extension (``data_readable.csv``).
    When the result would overwrite the input, ``_converted`` is used instead.
    """
    source = Path(input_path)
    directory = Path(output_dir) if output_dir is not None else source.parent
    target = directory / f"{source.stem}{suffix}{output_format.extension}"
    if target.resolve() == source.resolve():
        target = directory / f"{source.stem}{suffix or FALLBACK_SUFFIX}{output_format.extension}"
        if target.resolve() == source.resolve():
            target = directory / f"{source.stem}{suffix}{FALLBACK_SUFFIX}{output_format.extension}"
    return target


def convert_text(
    text: str,
    source: str = "<string>",
    options: Optional[ConvertOptions] = None,
) -> ConvertedDocument:
    """Convert one document in memory.

    Raises:
        EmptySourceError: If the document holds no records.
        MalformedJsonError: If sanitized JSON still does not parse.
        MissingIdColumnError: If CSV input has no ``id`` column.
    """
    text = strip_byte_order_mark(text)
    options = options or ConvertOptions()
    warnings: List[str] = []
    input_format = detect_format(text)

    if input_format is InputFormat.JSON:
        sanitized, report = sanitize_with_report(text)
        if report.changed:
            logger.debug(
                f"{source}: escaped {report.escaped_controls} control chars, "
                f"replaced {report.replaced_controls}, "
                f"escaped {report.escaped_backslashes} backslashes"
            )
        data = parse_sanitized(text, sanitized, source=source, window=options.context_window)
        records = records_from_payload(data, warnings)
        output_format = options.json_target
    else:
        report = None
        records = from_csv(text, columns=options.columns, warnings=warnings)
        output_format = OutputFormat.JSON

    if output_format is OutputFormat.CSV:
        header = build_header(records)
        output_text = to_csv(records)
    else:
        header = []
        output_text = to_json(records)

    return ConvertedDocument(
        input_format=input_format,
        output_format=output_format,
        output_text=output_text,
        records=records,
        header=header,
        sanitize_report=report,
        warnings=warnings,
    )


def _read_text(path: Path, encoding: str) -> str:
    return path.read_text(encoding=encoding)


def _write_text(path: Path, content: str, encoding: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)


class RecordConverter:
    """
    Converts record export files, one output file per input.

    Usage:
        converter = RecordConverter(ConvertOptions(output_suffix="_readable"))
        report = converter.convert_batch(["table.json", "people.csv"])

        for result in report.results:
            if not result.success:
                for error in result.errors:
                    print(f"Error: {error.message}")
    """

    def __init__(
        self,
        options: Optional[ConvertOptions] = None,
        reader: Optional[ContentReader] = None,
        writer: Optional[ContentWriter] = None,
    ):
        """
        Initialize the converter.

        Args:
            options: Conversion options
            reader: Content provider; defaults to reading the file from disk
            writer: Content sink; defaults to writing the file to disk
        """
        self.options = options or ConvertOptions()
        self._reader = reader or (lambda path: _read_text(path, self.options.encoding))
        self._writer = writer or (lambda path, content: _write_text(path, content, self.options.encoding))

    def convert_file(self, path: Union[str, Path]) -> ConversionResult:
        """
        Convert a single file. Per-file errors are captured on the result.

        Args:
            path: Input file path

        Returns:
            ConversionResult with output path or error details
        """
        start_time = datetime.now()
        source = Path(path)
        result = ConversionResult(source=str(source), success=False)
        logger.info(f"Processing: {source}")

        try:
            try:
                text = self._reader(source)
            except (OSError, UnicodeDecodeError) as e:
                raise UnreadableFileError(str(source), str(e)) from e

            document = convert_text(text, source=str(source), options=self.options)
            result.input_format = document.input_format
            result.output_format = document.output_format
            result.warnings.extend(document.warnings)

            output_path = derive_output_path(
                source,
                document.output_format,
                suffix=self.options.output_suffix,
                output_dir=self.options.output_dir,
            )
            self._writer(output_path, document.output_text)

            result.success = True
            result.output_path = output_path
            result.record_ids = document.records.ids()
            result.columns = document.header
            result.stats.total_records = len(document.records)
            result.stats.columns = len(document.header)
            result.stats.skipped_rows = self._count_skipped(document)

            preview = ", ".join(result.record_ids[:PREVIEW_IDS])
            logger.info(f"Converted {len(document.records)} records to {output_path}")
            logger.info(f"IDs: {preview}...")

        except RecordConvertError as e:
            self._record_issue(result, e)
        except Exception as e:
            logger.exception(f"Unexpected error processing {source}")
            result.errors.append(
                ConversionIssue(code="CONVERSION_ERROR", message=f"Unexpected error: {e}", file=str(source))
            )

        result.stats.processing_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        return result

    def convert_batch(self, paths: Iterable[Union[str, Path]]) -> BatchReport:
        """Convert every file; a failure never stops the remaining files."""
        report = BatchReport()
        for path in paths:
            report.results.append(self.convert_file(path))
        logger.info(
            f"Batch finished: {report.succeeded} converted, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report

    def _record_issue(self, result: ConversionResult, error: RecordConvertError) -> None:
        context = getattr(error, "context", None)
        issue = ConversionIssue(
            code=error.code,
            message=str(error),
            file=result.source,
            position=context.position if context is not None else None,
            detail=context.format() if context is not None else None,
            warning=error.level == logging.WARNING,
        )
        result.errors.append(issue)
        if issue.detail:
            logger.log(error.level, f"{result.source}: {error}\n{issue.detail}")
        else:
            logger.log(error.level, f"{result.source}: {error}")

    def _count_skipped(self, document: ConvertedDocument) -> int:
        # replaced duplicates are not skips; only id-less rows and records are
        return sum(1 for warning in document.warnings if warning.endswith(SKIP_MARKER))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def convert_file(
    input_path: Union[str, Path],
    options: Optional[ConvertOptions] = None,
) -> ConversionResult:
    """
    Convenience function to convert one file on disk.

    Args:
        input_path: Path to the JSON or CSV export
        options: Optional conversion options

    Returns:
        ConversionResult with output path or error details
    """
    return RecordConverter(options).convert_file(input_path)


def convert_files(
    input_paths: Iterable[Union[str, Path]],
    options: Optional[ConvertOptions] = None,
) -> BatchReport:
    """Convenience function to convert several files on disk."""
    return RecordConverter(options).convert_batch(input_paths)


__all__ = [
    "RecordConverter",
    "convert_file",
    "convert_files",
    "convert_text",
    "derive_output_path",
    "detect_format",
    "strip_byte_order_mark",
]
