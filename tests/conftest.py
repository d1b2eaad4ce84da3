"""Shared fixtures for record_convert tests."""

from __future__ import annotations

import pytest

from record_convert.domain import Record, RecordCollection


@pytest.fixture
def malformed_payload() -> str:
    """API payload with a raw newline and tab inside string values."""
    return (
        '{"records": [\n'
        '  {"id": "rec1", "createdTime": "2024-01-01T00:00:00Z",'
        ' "fields": {"Name": "Acme", "Notes": "Line one\nLine two"}},\n'
        '  {"id": "rec2", "createdTime": "2024-01-02T00:00:00Z",'
        ' "fields": {"City": "Paris, FR", "Notes": "tab\there"}}\n'
        "]}\n"
    )


@pytest.fixture
def sample_records() -> RecordCollection:
    return RecordCollection(
        [
            Record(
                id="rec1",
                created_time="2024-01-01T00:00:00Z",
                fields={"Name": "Acme", "Notes": "Line one\nLine two"},
            ),
            Record(
                id="rec2",
                created_time="2024-01-02T00:00:00Z",
                fields={"City": "Paris, FR"},
            ),
        ]
    )
