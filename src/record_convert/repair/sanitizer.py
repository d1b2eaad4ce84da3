"""Control-character sanitizer for malformed JSON exports.

Record exports frequently carry raw newlines, tabs and carriage returns
inside string literals, plus backslashes that do not start a valid JSON
escape. ``sanitize`` rewrites only the content of string literals so the
result parses with a strict JSON parser; text between tokens is copied
through untouched.

The scanner tracks two states (``ScanState.OUTSIDE`` / ``ScanState.IN_STRING``)
and peeks at most one character ahead, when deciding whether a backslash
starts a valid escape sequence.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Tuple

from ..domain.types import ScanState

# Characters allowed after a backslash in a JSON string.
# ``\u`` is accepted without checking the four hex digits that should follow.
VALID_ESCAPES = frozenset('nrt"\\/ubf')

CONTROL_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass
class SanitizeReport:
    """Counters collected while sanitizing one document."""

    escaped_controls: int = 0
    replaced_controls: int = 0
    escaped_backslashes: int = 0
    ended_in_string: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.escaped_controls or self.replaced_controls or self.escaped_backslashes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def sanitize_with_report(text: str) -> Tuple[str, SanitizeReport]:
    """Sanitize ``text`` and return it together with a ``SanitizeReport``."""
    report = SanitizeReport()
    result: List[str] = []
    state = ScanState.OUTSIDE
    length = len(text)
    i = 0

    while i < length:
        char = text[i]

        if char == "\\":
            if state is ScanState.IN_STRING and i + 1 < length:
                next_char = text[i + 1]
                if next_char in VALID_ESCAPES:
                    result.append(char)
                    result.append(next_char)
                    i += 2
                    continue
                # Stray backslash: escape it, leave the next char for the next pass
                result.append("\\\\")
                report.escaped_backslashes += 1
                i += 1
                continue
            result.append(char)
            i += 1
            continue

        if char == '"':
            state = ScanState.OUTSIDE if state is ScanState.IN_STRING else ScanState.IN_STRING
            result.append(char)
            i += 1
            continue

        if state is ScanState.IN_STRING and ord(char) < 0x20:
            escaped = CONTROL_ESCAPES.get(char)
            if escaped is not None:
                result.append(escaped)
                report.escaped_controls += 1
            else:
                result.append(" ")
                report.replaced_controls += 1
            i += 1
            continue

        result.append(char)
        i += 1

    report.ended_in_string = state is ScanState.IN_STRING
    return "".join(result), report


def sanitize(text: str) -> str:
    """Return ``text`` rewritten so that every string literal is valid JSON.

    Never fails. Unbalanced quotes are passed through and surface later as a
    JSON parse error.
    """
    sanitized, _ = sanitize_with_report(text)
    return sanitized


__all__ = ["CONTROL_ESCAPES", "SanitizeReport", "VALID_ESCAPES", "sanitize", "sanitize_with_report"]
