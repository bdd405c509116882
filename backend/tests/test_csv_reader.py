"""Tests for CSV parsing of user import files."""
from app.services.csv_reader import parse_csv


def test_rows_keyed_by_stripped_header():
    result = parse_csv(b"ID , First,Address[0],Address[1]\nu1,Ann,123 Main,Apt 4\n")
    assert result.errors == []
    assert result.data == [
        {"ID": "u1", "First": "Ann", "Address[0]": "123 Main", "Address[1]": "Apt 4"},
    ]


def test_utf8_bom_and_quoted_newlines():
    content = b'\xef\xbb\xbfID,Note\nu1,"line one\nline two"\n'
    result = parse_csv(content)
    assert result.data == [{"ID": "u1", "Note": "line one\nline two"}]


def test_blank_lines_skipped():
    result = parse_csv(b"ID,First\n\nu1,Ann\n,\n")
    assert result.data == [{"ID": "u1", "First": "Ann"}]


def test_short_and_long_rows_reported_but_kept():
    result = parse_csv(b"ID,First,Last\nu1,Ann\nu2,Bo,Li,extra\n")
    assert result.data == [
        {"ID": "u1", "First": "Ann", "Last": ""},
        {"ID": "u2", "First": "Bo", "Last": "Li"},
    ]
    assert [e.row for e in result.errors] == [2, 3]
    assert "Expected 3 fields but found 2" in result.errors[0].message


def test_empty_file():
    result = parse_csv(b"")
    assert result.data == []
    assert result.errors[0].message == "File has no header row"
