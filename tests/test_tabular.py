import pytest

from graduation.data import parse_table
from graduation.errors import MissingHeadersError
from graduation.models import WarningKind


def test_rows_are_mapped_by_header_in_source_order():
    text = "A,B,C\n1,2,3\n4,5,6\n"
    result = parse_table(text, ["A", "B"])

    assert result.headers == ["A", "B", "C"]
    assert [row.fields for row in result.rows] == [
        {"A": "1", "B": "2", "C": "3"},
        {"A": "4", "B": "5", "C": "6"},
    ]
    assert [row.line for row in result.rows] == [2, 3]
    assert result.warnings == []


def test_missing_headers_are_all_listed():
    with pytest.raises(MissingHeadersError) as excinfo:
        parse_table("A,C\n1,2", ["A", "B", "D"])

    assert excinfo.value.missing == ["B", "D"]
    assert "B, D" in str(excinfo.value)


def test_empty_input_is_missing_every_header():
    with pytest.raises(MissingHeadersError) as excinfo:
        parse_table("\n\n", ["A"])
    assert excinfo.value.missing == ["A"]


def test_malformed_row_is_skipped_with_warning(caplog):
    text = "A,B\n1,2\n3\n4,5,6\n7,8"
    with caplog.at_level("WARNING"):
        result = parse_table(text, ["A", "B"])

    assert [row.fields["A"] for row in result.rows] == ["1", "7"]
    assert [w.kind for w in result.warnings] == [WarningKind.MALFORMED_ROW] * 2
    assert [w.line for w in result.warnings] == [3, 4]
    assert "line 3" in caplog.text


def test_header_after_blank_lines_and_bom():
    text = "\ufeff\n  A , B \n\n x , y \n"
    result = parse_table(text, ["A", "B"])

    assert result.headers == ["A", "B"]
    assert result.rows[0].fields == {"A": "x", "B": "y"}
    assert result.rows[0].line == 4


def test_custom_delimiter():
    result = parse_table("A;B\n1,5;2", ["A", "B"], delimiter=";")
    assert result.rows[0].fields == {"A": "1,5", "B": "2"}


def test_values_are_not_converted():
    result = parse_table("A\n007", ["A"])
    assert result.rows[0].fields["A"] == "007"
