"""Tests for the CSV cell codec."""

import pytest

from record_convert.csv2json import escape_cell, join_fields, split_lines, split_row, stringify_value
from record_convert.errors import UnsupportedFieldValueError


def test_split_quoted_fields():
    line = 'Acme Inc.,"Widgets, and Gadgets","She said ""hi"""'
    assert split_row(line) == ["Acme Inc.", "Widgets, and Gadgets", 'She said "hi"']


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", []),
        ("a", ["a"]),
        ("a,", ["a", ""]),
        (",", ["", ""]),
        ("a,,b", ["a", "", "b"]),
        ('"x"y', ["xy"]),
        ('"a,b",c', ["a,b", "c"]),
    ],
)
def test_split_edge_cases(line, expected):
    assert split_row(line) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("plain", "plain"),
        ("", ""),
        ("a\nb", "a | b"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("one\ntwo, three", '"one | two, three"'),
        ("carriage\rreturn", '"carriage\rreturn"'),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (1.5, "1.5"),
        (2.0, "2"),
        (-0.0, "0"),
        (["x", "y"], '"[""x"",""y""]"'),
        ({"k": 1}, '"{""k"":1}"'),
    ],
)
def test_escape_cell(value, expected):
    assert escape_cell(value) == expected


def test_stringify_rejects_non_json_values():
    with pytest.raises(UnsupportedFieldValueError):
        stringify_value(object())


@pytest.mark.parametrize(
    "a, b",
    [
        ("plain", "text"),
        ("with, comma", "and more, commas"),
        ('quote " inside', '""'),
        ("", ""),
        (",", '"'),
        ('"leading', 'trailing"'),
    ],
)
def test_split_inverts_escape(a, b):
    assert split_row(join_fields([escape_cell(a), escape_cell(b)])) == [a, b]


def test_split_inverts_escape_with_newline_convention():
    a, b = "first\nsecond", 'multi\nline, "quoted"'
    cells = split_row(join_fields([escape_cell(a), escape_cell(b)]))
    assert [cell.replace(" | ", "\n") for cell in cells] == [a, b]


def test_split_lines_skips_blank_lines_and_carriage_returns():
    assert split_lines("a,b\r\nc,d\n\n   \ne,f") == ["a,b", "c,d", "e,f"]
