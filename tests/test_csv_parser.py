# tests/test_csv_parser.py

"""
CSV Parser Tests - delimiter detection, quoting, blank lines and row errors
"""

import pytest

from app.core.exceptions import EmptyInputError, NoDataRowsError
from app.pipelines.csv_parser import clean_cell, detect_delimiter, parse_csv_content, split_line


class TestInputErrors:
    """Inputs that stop parsing before any row is produced."""

    @pytest.mark.parametrize("content", ["", "   ", "\n\n  \n"])
    def test_empty_content(self, content):
        with pytest.raises(EmptyInputError):
            parse_csv_content(content)

    def test_header_only(self):
        with pytest.raises(NoDataRowsError) as exc_info:
            parse_csv_content("a,b,c\n\n   \n")
        assert exc_info.value.headers == ["a", "b", "c"]
        assert exc_info.value.error_code == "NO_DATA_ROWS"


class TestDelimiterDetection:
    """Comma vs semicolon, decided from the header line."""

    def test_semicolon_without_commas(self):
        table = parse_csv_content("a;b;c\n1;2;3\n")
        assert table.delimiter == ";"
        assert table.headers == ["a", "b", "c"]
        assert table.rows == [{"a": "1", "b": "2", "c": "3"}]

    def test_comma_wins_with_more_fields(self):
        table = parse_csv_content("a,b;c,d\n1,2;3,4\n")
        assert table.delimiter == ","
        assert table.headers == ["a", "b;c", "d"]

    def test_semicolon_wins_with_more_fields(self):
        assert detect_delimiter("a;b;c,d") == ";"

    def test_comma_only(self):
        assert detect_delimiter("a,b,c") == ","

    def test_no_delimiter_defaults_to_comma(self):
        assert detect_delimiter("single") == ","


class TestQuoting:
    """Delimiters inside double quotes never split a field."""

    def test_comma_inside_quotes(self):
        table = parse_csv_content('name,domains\n"Smith, J","Tax Law, Civil Law"\n')
        assert table.rows == [{"name": "Smith, J", "domains": "Tax Law, Civil Law"}]

    def test_quoted_headers_are_unwrapped(self):
        table = parse_csv_content('"lawyer_id","branch_name"\nL1,Pune\n')
        assert table.headers == ["lawyer_id", "branch_name"]

    def test_space_after_delimiter_before_quote(self):
        assert split_line('a, "b,c"', ",") == ["a", "b,c"]

    def test_escaped_quotes_keep_one_layer(self):
        table = parse_csv_content('a,b\n"""Q""",x\n')
        assert table.rows == [{"a": '"Q"', "b": "x"}]

    def test_unsplittable_header_falls_back_to_plain_split(self):
        table = parse_csv_content('"a" ,b\n1,2\n')
        assert table.headers == ["a", "b"]
        assert table.rows == [{"a": "1", "b": "2"}]

    def test_clean_cell_strips_one_layer(self):
        assert clean_cell('  "x"  ') == "x"
        assert clean_cell('""x""') == '"x"'
        assert clean_cell('"') == '"'


class TestRows:
    """Row construction and per-row error collection."""

    def test_blank_lines_discarded_and_numbered(self):
        table = parse_csv_content("a,b\n1,2\n\n   \n3,4\n")
        assert [r["a"] for r in table.rows] == ["1", "3"]
        assert table.row_numbers == [1, 2]

    def test_crlf_line_endings(self):
        table = parse_csv_content("a,b\r\n1,2\r\n")
        assert table.rows == [{"a": "1", "b": "2"}]

    def test_missing_trailing_cells_become_empty(self):
        table = parse_csv_content("a,b,c\n1\n")
        assert table.rows == [{"a": "1", "b": "", "c": ""}]

    def test_values_are_trimmed(self):
        table = parse_csv_content("a,b\n  1 ,  two  \n")
        assert table.rows == [{"a": "1", "b": "two"}]

    def test_byte_order_mark_removed(self):
        table = parse_csv_content("\ufefflawyer_id,x\nL1,2\n")
        assert table.headers[0] == "lawyer_id"

    def test_duplicate_header_first_column_wins(self):
        table = parse_csv_content("a,a\n1,2\n")
        assert table.rows == [{"a": "1"}]

    def test_trailing_empty_extra_cell_is_accepted(self):
        table = parse_csv_content("a,b\n1,2,\n")
        assert table.rows == [{"a": "1", "b": "2"}]
        assert table.errors == []

    def test_extra_cells_become_row_error(self):
        table = parse_csv_content("a,b\n1,2,3\n4,5\n")
        assert table.rows == [{"a": "4", "b": "5"}]
        assert table.row_numbers == [2]
        assert len(table.errors) == 1
        assert table.errors[0].row_number == 1
        assert table.data_row_count == 2

    def test_malformed_quoting_becomes_row_error(self):
        table = parse_csv_content('a,b\n"x"y,2\n3,4\n')
        assert [e.row_number for e in table.errors] == [1]
        assert table.rows == [{"a": "3", "b": "4"}]
