"""
Data models for record conversion.

This module contains dataclasses for:
- Conversion options
- Error reporting
- Per-file and batch results
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.models import RecordCollection
from ..domain.types import InputFormat, OutputFormat
from ..repair.sanitizer import SanitizeReport


@dataclass
class ConvertOptions:
    """Options for a conversion run."""
    json_target: OutputFormat = OutputFormat.CSV
    output_suffix: str = ""
    output_dir: Optional[Path] = None
    columns: Optional[List[str]] = None
    context_window: int = 100
    encoding: str = "utf-8"


@dataclass
class ConversionIssue:
    """Represents a conversion failure recorded at the file boundary."""
    code: str
    message: str
    file: Optional[str] = None
    position: Optional[int] = None
    detail: Optional[str] = None
    warning: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {"code": self.code, "message": self.message}
        if self.file is not None:
            result["file"] = self.file
        if self.position is not None:
            result["position"] = self.position
        if self.detail is not None:
            result["detail"] = self.detail
        if self.warning:
            result["warning"] = True
        return result


@dataclass
class ConversionStats:
    """Statistics about the conversion process."""
    total_records: int = 0
    columns: int = 0
    skipped_rows: int = 0
    processing_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ConvertedDocument:
    """Output of a pure text-to-text conversion."""
    input_format: InputFormat
    output_format: OutputFormat
    output_text: str
    records: RecordCollection
    header: List[str] = field(default_factory=list)
    sanitize_report: Optional[SanitizeReport] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class ConversionResult:
    """Result of converting one file."""
    source: str
    success: bool
    output_path: Optional[Path] = None
    input_format: Optional[InputFormat] = None
    output_format: Optional[OutputFormat] = None
    record_ids: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    errors: List[ConversionIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: ConversionStats = field(default_factory=ConversionStats)

    @property
    def skipped(self) -> bool:
        """True when the file failed only with warning-level issues."""
        return not self.success and all(issue.warning for issue in self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "success": self.success,
            "output_path": str(self.output_path) if self.output_path else None,
            "input_format": self.input_format.value if self.input_format else None,
            "output_format": self.output_format.value if self.output_format else None,
            "record_ids": self.record_ids,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "stats": self.stats.to_dict()
        }


@dataclass
class BatchReport:
    """Results for every file of a batch, in input order."""
    results: List[ConversionResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def skipped(self) -> int:
        return sum(1 for result in self.results if result.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.success and not result.skipped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
