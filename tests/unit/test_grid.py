"""
Unit tests for the row/column codec (fpga_pinout.grid).
"""

import pytest

from fpga_pinout.grid import (
    compare_rows,
    grid_to_position,
    index_to_row,
    parse_grid_position,
    row_to_index,
    sort_pins_by_grid,
)
from fpga_pinout.models import GridPosition, Position


class TestRowCodec:
    """Tests for row_to_index() / index_to_row()."""

    def test_round_trip_two_letter_range(self):
        for n in range(702):
            assert row_to_index(index_to_row(n)) == n

    def test_round_trip_beyond_two_letters(self):
        for n in (702, 703, 18277, 18278):
            assert row_to_index(index_to_row(n)) == n

    def test_label_lengths(self):
        assert all(len(index_to_row(n)) == 1 for n in range(26))
        assert all(len(index_to_row(n)) == 2 for n in range(26, 702))
        assert len(index_to_row(702)) == 3

    @pytest.mark.parametrize(
        "label,index",
        [("A", 0), ("Z", 25), ("AA", 26), ("AB", 27), ("AZ", 51), ("BA", 52), ("ZZ", 701), ("AAA", 702)],
    )
    def test_known_values(self, label, index):
        assert row_to_index(label) == index
        assert index_to_row(index) == label

    def test_lower_case_accepted(self):
        assert row_to_index("aa") == 26

    @pytest.mark.parametrize("label", ["", "A1", "1", "Ä", "A-"])
    def test_malformed_label_is_zero(self, label):
        assert row_to_index(label) == 0

    def test_negative_index_is_a(self):
        assert index_to_row(-1) == "A"
        assert index_to_row(-100) == "A"

    def test_compare_by_index_not_lexically(self):
        # lexically "AA" < "B"; on a package AA comes after Z
        assert compare_rows("B", "AA") < 0
        assert compare_rows("AA", "Z") > 0
        assert compare_rows("C", "c") == 0


class TestParseGridPosition:
    """Tests for parse_grid_position()."""

    def test_letters_then_digits(self):
        assert parse_grid_position("AB12") == GridPosition(row="AB", col=12)

    def test_row_upper_cased(self):
        assert parse_grid_position("ab12") == GridPosition(row="AB", col=12)

    @pytest.mark.parametrize("pin_number", ["12", "A", "A0", "1A", "A1B", "A-1", ""])
    def test_undecodable(self, pin_number):
        assert parse_grid_position(pin_number) is None

    def test_row_index_property(self):
        assert parse_grid_position("AA3").row_index == 26
        assert parse_grid_position("AA3").label == "AA3"


class TestGridToPosition:
    """Tests for grid_to_position()."""

    def test_a1_at_origin(self):
        assert grid_to_position(GridPosition("A", 1)) == Position(0, 0)

    def test_default_spacing(self):
        assert grid_to_position(GridPosition("B", 3)) == Position(176, 88)

    def test_multi_letter_rows_use_full_index(self):
        assert grid_to_position(GridPosition("AA", 1), tile_spacing=10) == Position(0, 260)


class TestSortPinsByGrid:
    """Tests for sort_pins_by_grid()."""

    def test_row_index_then_column(self, make_pin):
        pins = [make_pin("AA1"), make_pin("B2"), make_pin("B10"), make_pin("A5")]
        ordered = [p.pin_number for p in sort_pins_by_grid(pins)]
        assert ordered == ["A5", "B2", "B10", "AA1"]
