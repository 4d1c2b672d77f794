"""
Unit tests for the validation rule table (fpga_pinout.validation.rules).
"""

import pytest

from fpga_pinout.exceptions import RuleTableError
from fpga_pinout.validation.rules import default_rule_table, load_rule_table


class TestDefaultRuleTable:

    def test_contents(self):
        table = default_rule_table()
        assert [(p.positive, p.negative) for p in table.differential.suffix_pairs] == [
            ("_P", "_N"),
            ("+", "-"),
        ]
        assert [f.name for f in table.io_families] == [
            "single_ended_vs_differential",
            "sstl_vs_pod",
            "hstl_vs_lvcmos",
            "mipi_vs_lvcmos",
        ]
        assert table.clock.regular_pins_reported == 3
        assert table.speed.pins_reported == 2

    def test_parsed_once(self):
        assert default_rule_table() is default_rule_table()

    def test_regexes(self):
        table = default_rule_table()
        assert table.differential.lvds_regex.match("IO_L6P_T0_34")
        assert table.differential.single_letter_regex.search("clk0p")
        assert not table.differential.single_letter_regex.search("cap")
        assert table.clock.clock_capable_regex.search("IO_L12P_T1_MRCC_35")


class TestLoadRuleTable:

    def test_custom_table(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "differential:\n"
            "  suffix_pairs:\n"
            "    - {positive: _T, negative: _C}\n"
            "io_families: []\n",
            encoding="utf-8",
        )
        table = load_rule_table(path)
        assert table.differential.suffix_pairs[0].positive == "_T"
        assert table.differential.lvds_regex is None
        assert table.io_families == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(RuleTableError, match="empty"):
            load_rule_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError):
            load_rule_table(tmp_path / "missing.yaml")

    def test_bad_pattern(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("differential:\n  lvds_pattern: '(unclosed'\n", encoding="utf-8")
        with pytest.raises(RuleTableError, match="lvds_pattern"):
            load_rule_table(path)

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("differential: [unclosed\n", encoding="utf-8")
        with pytest.raises(RuleTableError):
            load_rule_table(path)
