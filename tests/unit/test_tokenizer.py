"""
Unit tests for the quote-aware line tokenizer (fpga_pinout.tokenizer).
"""

from fpga_pinout.tokenizer import is_blank_row, sniff_delimiter, split_line


class TestSplitLine:
    """Tests for split_line()."""

    def test_quoted_delimiter_does_not_split(self):
        assert split_line('"SIG, A","1",,') == ["SIG, A", "1", ""]

    def test_fields_are_trimmed(self):
        assert split_line(" A1 ,  CLK ,Input") == ["A1", "CLK", "Input"]

    def test_single_trailing_delimiter(self):
        assert split_line("A,B,") == ["A", "B", ""]

    def test_empty_fields_in_the_middle_kept(self):
        assert split_line("A,,C") == ["A", "", "C"]

    def test_unterminated_quote_does_not_raise(self):
        assert split_line('A1,"open, field') == ["A1", "open, field"]

    def test_other_delimiter(self):
        assert split_line("GND : A1 : gnd", ":") == ["GND", "A1", "gnd"]

    def test_tab_delimiter(self):
        assert split_line("A1\tCLK\tInput", "\t") == ["A1", "CLK", "Input"]


class TestIsBlankRow:

    def test_delimiter_only(self):
        assert is_blank_row(",,, ,")
        assert is_blank_row("   ")
        assert is_blank_row(":::", ":")

    def test_data_row(self):
        assert not is_blank_row("A1,,")


class TestSniffDelimiter:

    def test_most_frequent_wins(self):
        assert sniff_delimiter("A1\tCLK\tInput") == "\t"
        assert sniff_delimiter("A1;CLK;Input,x") == ";"

    def test_comma_on_tie_or_none(self):
        assert sniff_delimiter("A1,CLK;Input") == ","
        assert sniff_delimiter("no delimiters here") == ","
