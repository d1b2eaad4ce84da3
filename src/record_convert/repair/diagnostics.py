"""Diagnostics for documents that still fail to parse after sanitizing.

When the sanitizer meets a malformation it does not anticipate, the JSON
parser reports a character offset. The helpers here cut a window of both the
original and the sanitized text around that offset so an operator can see
which pattern slipped through.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..errors import MalformedJsonError
from .sanitizer import SanitizeReport, sanitize_with_report

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 100


def _window(text: str, position: int, size: int) -> str:
    start = max(0, position - size)
    end = min(len(text), position + size)
    return text[start:end]


def _char_at(text: str, position: int) -> Optional[str]:
    if 0 <= position < len(text):
        return text[position]
    return None


def _describe_char(char: Optional[str]) -> str:
    if char is None:
        return "<end of input>"
    return f"{json.dumps(char)} (charCode: {ord(char)})"


@dataclass
class ParseFailureContext:
    """Where and why strict JSON parsing failed."""

    position: int
    message: str
    original_snippet: str
    sanitized_snippet: str
    original_char: Optional[str] = None
    sanitized_char: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def code_point(self) -> Optional[int]:
        return ord(self.sanitized_char) if self.sanitized_char is not None else None

    def format(self) -> str:
        location = f"position {self.position}"
        if self.line is not None:
            location += f" (line {self.line}, column {self.column})"
        lines = [
            f"JSON parse error at {location}: {self.message}",
            "=== ORIGINAL CONTENT ===",
            f"...{self.original_snippet}...",
            f"Character at position {self.position}: {_describe_char(self.original_char)}",
            "=== SANITIZED CONTENT ===",
            f"...{self.sanitized_snippet}...",
            f"Character at position {self.position}: {_describe_char(self.sanitized_char)}",
        ]
        return "\n".join(lines)


def describe_parse_failure(
    original: str,
    sanitized: str,
    position: int,
    message: str = "",
    window: int = DEFAULT_WINDOW,
    line: Optional[int] = None,
    column: Optional[int] = None,
) -> ParseFailureContext:
    """Build a ``ParseFailureContext`` for a failure at ``position``."""
    return ParseFailureContext(
        position=position,
        message=message,
        original_snippet=_window(original, position, window),
        sanitized_snippet=_window(sanitized, position, window),
        original_char=_char_at(original, position),
        sanitized_char=_char_at(sanitized, position),
        line=line,
        column=column,
    )


def parse_sanitized(
    original: str,
    sanitized: str,
    source: str = "<string>",
    window: int = DEFAULT_WINDOW,
) -> Any:
    """Parse sanitized text, raising ``MalformedJsonError`` with context on failure."""
    try:
        return json.loads(sanitized)
    except json.JSONDecodeError as e:
        context = describe_parse_failure(
            original,
            sanitized,
            e.pos,
            message=e.msg,
            window=window,
            line=e.lineno,
            column=e.colno,
        )
        logger.debug(f"Parse failure in {source}:\n{context.format()}")
        raise MalformedJsonError(
            f"{source}: JSON parse error at position {e.pos}: {e.msg}", context
        ) from e


@dataclass
class DiagnosticReport:
    """Outcome of running the sanitizer and parser over one document."""

    original_size: int
    sanitized_size: int
    parsed: bool
    sanitize_report: SanitizeReport
    error: Optional[str] = None
    context: Optional[ParseFailureContext] = None

    def format(self) -> str:
        lines: List[str] = [
            f"Original file size: {self.original_size}",
            f"Fixed content size: {self.sanitized_size}",
            f"Control characters escaped: {self.sanitize_report.escaped_controls}",
            f"Control characters replaced: {self.sanitize_report.replaced_controls}",
            f"Stray backslashes escaped: {self.sanitize_report.escaped_backslashes}",
        ]
        if self.sanitize_report.ended_in_string:
            lines.append("Scan ended inside a string literal (unbalanced quotes?)")
        if self.context is not None:
            lines.append(self.context.format())
        if self.parsed:
            lines.append("✓ JSON parsed successfully!")
        else:
            lines.append(f"✗ JSON parse error: {self.error}")
        return "\n".join(lines)


def diagnose_text(text: str, position: Optional[int] = None, window: int = 200) -> DiagnosticReport:
    """Sanitize and parse ``text``, reporting context around a position.

    Args:
        text: Raw document content.
        position: Offset to inspect. Defaults to the parse-error offset, if any.
        window: Number of characters shown on each side of the offset.

    Returns:
        DiagnosticReport describing the attempt.
    """
    sanitized, report = sanitize_with_report(text)
    parsed = True
    error = None
    failure_pos = None
    message = ""
    line = column = None

    try:
        json.loads(sanitized)
    except json.JSONDecodeError as e:
        parsed = False
        error = str(e)
        failure_pos, message, line, column = e.pos, e.msg, e.lineno, e.colno

    target = position if position is not None else failure_pos
    context = None
    if target is not None:
        if position is not None:
            # Line/column belong to the parse error, not an arbitrary offset
            line = column = None
        context = describe_parse_failure(
            text, sanitized, target, message=message, window=window, line=line, column=column
        )

    return DiagnosticReport(
        original_size=len(text),
        sanitized_size=len(sanitized),
        parsed=parsed,
        sanitize_report=report,
        error=error,
        context=context,
    )


__all__ = [
    "DEFAULT_WINDOW",
    "DiagnosticReport",
    "ParseFailureContext",
    "describe_parse_failure",
    "diagnose_text",
    "parse_sanitized",
]
