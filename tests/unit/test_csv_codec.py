"""
Unit tests for the CSV codec and sink.

Includes a hypothesis round-trip property for encode_row/parse_row.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from condition_log.core.fields import CSV_COLUMNS, CSV_HEADER
from condition_log.storage import CsvFormatError, CsvSink, PersistenceError
from condition_log.storage.csv_codec import encode_row, escape, iter_logical_rows, parse_row

# Text biased towards the characters that need quoting
csv_text = st.text(alphabet=st.sampled_from([",", '"', "\n", "\r", "a", "é", " ", "Ω", "\t"]) | st.characters())


class TestEscape:
    """Tests for escape"""

    def test_plain_value_unchanged(self):
        assert escape("dev-42") == "dev-42"

    def test_empty_value_unchanged(self):
        assert escape("") == ""

    @pytest.mark.parametrize("value", ["a,b", "line\nbreak", "cr\rhere"])
    def test_special_characters_quote_the_cell(self, value):
        assert escape(value) == f'"{value}"'

    def test_quotes_are_doubled(self):
        assert escape('He said, "ok"') == '"He said, ""ok"""'

    def test_no_backslash_escaping(self):
        assert escape("C:\\temp") == "C:\\temp"


class TestParseRow:
    """Tests for parse_row"""

    def test_empty_line_yields_one_empty_cell(self):
        assert parse_row("") == [""]

    def test_plain_cells(self):
        assert parse_row("a,b,,c") == ["a", "b", "", "c"]

    def test_quoted_cell_with_comma_and_quotes(self):
        assert parse_row('x,"He said, ""ok""",y') == ["x", 'He said, "ok"', "y"]

    def test_quoted_cell_with_embedded_newline(self):
        assert parse_row('"a\r\nb",c') == ["a\r\nb", "c"]

    def test_stray_quote_toggles_quoted_mode(self):
        assert parse_row('ab"c,d"e') == ["abc,de"]

    def test_trailing_comma_yields_empty_last_cell(self):
        assert parse_row("a,") == ["a", ""]

    @given(csv_text)
    def test_property_single_cell_round_trip(self, value):
        """Property test: parse_row(encode_row([s]))[0] == s"""
        assert parse_row(encode_row([value]))[0] == value

    @given(st.lists(csv_text, min_size=1, max_size=14))
    def test_property_row_round_trip(self, cells):
        assert parse_row(encode_row(cells)) == cells


class TestIterLogicalRows:
    """Tests for iter_logical_rows"""

    def test_rejoins_lines_split_inside_quotes(self):
        text = 'a,"multi\nline"\nb,c\n'

        assert list(iter_logical_rows(text)) == ['a,"multi\nline"', "b,c"]

    def test_crlf_terminators_are_stripped(self):
        assert list(iter_logical_rows("a,b\r\nc,d\r\n")) == ["a,b", "c,d"]

    def test_unicode_line_separator_is_not_a_row_break(self):
        assert list(iter_logical_rows("a\u2028b,c\n")) == ["a\u2028b,c"]


class TestCsvSink:
    """Tests for CsvSink"""

    def test_new_file_gets_header_then_row(self, tmp_path):
        sink = CsvSink(tmp_path / "sub" / "devices.csv")

        sink.append_row("r1")

        assert sink.path.read_bytes() == (CSV_HEADER + "\nr1\n").encode("utf-8")

    def test_header_written_only_once(self, tmp_path):
        sink = CsvSink(tmp_path / "devices.csv")

        for i in range(3):
            sink.append_row(f"row{i}")

        lines = sink.path.read_text(encoding="utf-8").splitlines()
        assert lines == [CSV_HEADER, "row0", "row1", "row2"]

    def test_existing_bytes_are_never_rewritten(self, tmp_path):
        path = tmp_path / "devices.csv"
        path.write_bytes(b"legacy header\r\nlegacy row\r\n")

        CsvSink(path).append_row("new")

        assert path.read_bytes() == b"legacy header\r\nlegacy row\r\nnew\n"

    def test_read_records_round_trips_embedded_newlines(self, tmp_path):
        sink = CsvSink(tmp_path / "devices.csv")
        cells = [f"c{i}" for i in range(len(CSV_COLUMNS))]
        cells[-1] = 'first line\r\nsecond, "quoted"'

        sink.append_row(encode_row(cells))
        sink.append_row(encode_row(cells))

        records = sink.read_records()
        assert len(records) == 2
        assert records[0]["notes"] == 'first line\r\nsecond, "quoted"'
        assert records[1]["uuid"] == "c0"

    def test_read_records_rejects_foreign_header(self, tmp_path):
        path = tmp_path / "devices.csv"
        path.write_text("id,name\n1,x\n", encoding="utf-8")

        with pytest.raises(CsvFormatError):
            CsvSink(path).read_records()

    def test_read_records_rejects_short_row(self, tmp_path):
        sink = CsvSink(tmp_path / "devices.csv")
        sink.append_row("only,three,cells")

        with pytest.raises(CsvFormatError) as exc_info:
            sink.read_records()

        assert "3 cells" in str(exc_info.value)

    def test_unwritable_destination_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file", encoding="utf-8")

        with pytest.raises(PersistenceError) as exc_info:
            CsvSink(blocker / "devices.csv").append_row("r")

        assert exc_info.value.sink == "csv"

    def test_unencodable_row_leaves_file_untouched(self, tmp_path):
        sink = CsvSink(tmp_path / "devices.csv")
        sink.append_row("ok")
        before = sink.path.read_bytes()

        with pytest.raises(PersistenceError):
            sink.append_row("bad \ud800 surrogate")

        assert sink.path.read_bytes() == before
