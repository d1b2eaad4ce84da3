"""Repair of malformed JSON exports."""

from .diagnostics import (
    DiagnosticReport,
    ParseFailureContext,
    describe_parse_failure,
    diagnose_text,
    parse_sanitized,
)
from .sanitizer import SanitizeReport, sanitize, sanitize_with_report

__all__ = [
    "DiagnosticReport",
    "ParseFailureContext",
    "SanitizeReport",
    "describe_parse_failure",
    "diagnose_text",
    "parse_sanitized",
    "sanitize",
    "sanitize_with_report",
]
