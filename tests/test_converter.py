"""Tests for the biconverter orchestrator."""

import json
from pathlib import Path

import pytest

from record_convert.csv2json import (
    ConvertOptions,
    RecordConverter,
    convert_file,
    convert_text,
    derive_output_path,
    detect_format,
)
from record_convert.domain import InputFormat, OutputFormat
from record_convert.errors import EmptySourceError, MalformedJsonError, MissingIdColumnError

EXPECTED_CSV = (
    "id,createdTime,City,Name,Notes\n"
    "rec1,2024-01-01T00:00:00Z,,Acme,Line one | Line two\n"
    'rec2,2024-01-02T00:00:00Z,"Paris, FR",,tab\there'
)


class MemoryStore:
    """In-memory content provider and sink."""

    def __init__(self, files):
        self.files = {Path(name): content for name, content in files.items()}
        self.written = {}

    def read(self, path):
        if path not in self.files:
            raise FileNotFoundError(f"No such file: {path}")
        return self.files[path]

    def write(self, path, content):
        self.written[path] = content


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"records": []}', InputFormat.JSON),
        ('  \n\t{"records": []}', InputFormat.JSON),
        ("id,Name\nrec1,Acme", InputFormat.CSV),
        ('\ufeff{"records": []}', InputFormat.JSON),
        ("[1, 2]", InputFormat.CSV),
        ("", InputFormat.CSV),
    ],
)
def test_detect_format(text, expected):
    assert detect_format(text) is expected


def test_convert_text_json_to_csv(malformed_payload):
    document = convert_text(malformed_payload)
    assert document.input_format is InputFormat.JSON
    assert document.output_format is OutputFormat.CSV
    assert document.output_text == EXPECTED_CSV
    assert document.header == ["id", "createdTime", "City", "Name", "Notes"]
    assert document.sanitize_report.escaped_controls == 2


def test_convert_text_json_to_id_keyed_json(malformed_payload):
    document = convert_text(malformed_payload, options=ConvertOptions(json_target=OutputFormat.JSON))
    data = json.loads(document.output_text)
    assert list(data) == ["rec1", "rec2"]
    assert data["rec1"]["fields"]["Notes"] == "Line one\nLine two"
    assert data["rec2"]["fields"]["Notes"] == "tab\there"


def test_convert_text_csv_to_json():
    document = convert_text(EXPECTED_CSV)
    assert document.input_format is InputFormat.CSV
    assert document.output_format is OutputFormat.JSON
    assert json.loads(document.output_text)["rec1"] == {
        "createdTime": "2024-01-01T00:00:00Z",
        "fields": {"Name": "Acme", "Notes": "Line one\nLine two"},
    }


def test_convert_text_json_with_byte_order_mark(malformed_payload):
    document = convert_text("\ufeff" + malformed_payload)
    assert document.input_format is InputFormat.JSON
    assert document.output_text == EXPECTED_CSV


def test_convert_text_csv_with_byte_order_mark():
    document = convert_text("\ufeff" + EXPECTED_CSV)
    assert document.records.ids() == ["rec1", "rec2"]


def test_convert_text_missing_records_key():
    with pytest.raises(EmptySourceError):
        convert_text('{"data": []}')


def test_convert_text_malformed_json():
    with pytest.raises(MalformedJsonError) as exc_info:
        convert_text('{"records": [{"id": "a",}]}')
    assert exc_info.value.position is not None


def test_convert_text_csv_without_id():
    with pytest.raises(MissingIdColumnError):
        convert_text("Name\nAcme")


def test_derive_output_path_replaces_extension():
    assert derive_output_path("data/table.json", OutputFormat.CSV) == Path("data/table.csv")
    assert derive_output_path("data/table.csv", OutputFormat.JSON) == Path("data/table.json")


def test_derive_output_path_with_suffix_and_directory(tmp_path):
    assert derive_output_path("data/table.json", OutputFormat.CSV, suffix="_readable") == Path(
        "data/table_readable.csv"
    )
    assert derive_output_path("data/table.json", OutputFormat.CSV, output_dir=tmp_path) == tmp_path / "table.csv"


def test_derive_output_path_never_overwrites_input():
    assert derive_output_path("data/table.json", OutputFormat.JSON) == Path("data/table_converted.json")


def test_convert_file_with_injected_io(malformed_payload):
    store = MemoryStore({"exports/table.json": malformed_payload})
    converter = RecordConverter(ConvertOptions(output_suffix="_readable"), reader=store.read, writer=store.write)

    result = converter.convert_file("exports/table.json")

    assert result.success
    assert result.output_path == Path("exports/table_readable.csv")
    assert store.written == {Path("exports/table_readable.csv"): EXPECTED_CSV}
    assert result.record_ids == ["rec1", "rec2"]
    assert result.stats.total_records == 2
    assert result.stats.columns == 5
    assert result.stats.skipped_rows == 0


def test_empty_source_is_skipped_without_output():
    store = MemoryStore({"empty.json": '{"data": []}'})
    result = RecordConverter(reader=store.read, writer=store.write).convert_file("empty.json")

    assert not result.success
    assert result.skipped
    assert result.errors[0].code == "EMPTY_SOURCE"
    assert store.written == {}


def test_malformed_json_reports_context():
    store = MemoryStore({"bad.json": '{"records": [{"id": "a", "fields": {"x": tru}}]}'})
    result = RecordConverter(reader=store.read, writer=store.write).convert_file("bad.json")

    assert not result.success
    assert not result.skipped
    issue = result.errors[0]
    assert issue.code == "MALFORMED_JSON"
    assert issue.position == 41
    assert "charCode: 116" in issue.detail
    assert store.written == {}


def test_batch_continues_past_failures(malformed_payload):
    store = MemoryStore(
        {
            "good.json": malformed_payload,
            "no_id.csv": "Name\nAcme",
            "people.csv": "id,Name\np1,Ann\n,ghost\np2,Bob",
        }
    )
    converter = RecordConverter(reader=store.read, writer=store.write)

    report = converter.convert_batch(["good.json", "missing.json", "no_id.csv", "people.csv"])

    assert [r.success for r in report.results] == [True, False, False, True]
    assert report.results[1].errors[0].code == "UNREADABLE_FILE"
    assert report.results[2].errors[0].code == "MISSING_ID_COLUMN"
    assert report.succeeded == 2
    assert report.failed == 2
    assert report.skipped == 0
    assert report.results[3].stats.skipped_rows == 1
    assert set(store.written) == {Path("good.csv"), Path("people.json")}


def test_unexpected_errors_are_captured():
    def explode(path):
        raise RuntimeError("disk on fire")

    result = RecordConverter(reader=explode).convert_file("x.json")
    assert not result.success
    assert result.errors[0].code == "CONVERSION_ERROR"
    assert "disk on fire" in result.errors[0].message


def test_convert_file_on_disk(tmp_path, malformed_payload):
    source = tmp_path / "table.json"
    source.write_text(malformed_payload, encoding="utf-8")

    result = convert_file(source)

    assert result.success
    assert (tmp_path / "table.csv").read_text(encoding="utf-8") == EXPECTED_CSV


def test_convert_file_missing_on_disk(tmp_path):
    result = convert_file(tmp_path / "absent.csv")
    assert not result.success
    assert result.errors[0].code == "UNREADABLE_FILE"
    assert not (tmp_path / "absent.json").exists()


def test_result_to_dict(malformed_payload):
    store = MemoryStore({"t.json": malformed_payload})
    result = RecordConverter(reader=store.read, writer=store.write).convert_file("t.json")
    data = result.to_dict()
    assert data["success"] is True
    assert data["input_format"] == "json"
    assert data["output_format"] == "csv"
    assert data["stats"]["total_records"] == 2


def test_convert_file_with_byte_order_mark_on_disk(tmp_path, malformed_payload):
    source = tmp_path / "table.json"
    source.write_bytes(b"\xef\xbb\xbf" + malformed_payload.encode("utf-8"))

    result = convert_file(source)

    assert result.success
    assert result.input_format is InputFormat.JSON
    assert (tmp_path / "table.csv").read_text(encoding="utf-8") == EXPECTED_CSV


def test_replaced_duplicate_ids_are_not_counted_as_skipped():
    store = MemoryStore({"people.csv": "id,Name\np1,Ann\np1,Annie\n,ghost\np2,Bob"})
    converter = RecordConverter(reader=store.read, writer=store.write)

    result = converter.convert_file("people.csv")

    assert result.success
    assert result.record_ids == ["p1", "p2"]
    assert result.stats.skipped_rows == 1
