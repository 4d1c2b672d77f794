"""
Unit tests for the constraint checks (fpga_pinout.validation.checks).

Pins are built by hand with the ``make_pin`` fixture, so ids are
``pin-<number>`` and the expected issue ids can be spelled out.
"""

from datetime import datetime, timezone

import pytest

from fpga_pinout.models import IssueType, PinType, Severity
from fpga_pinout.validation.checks import (
    check_bank_constraints,
    check_clock_isolation,
    check_differential_pairs,
    check_io_standard_compatibility,
    check_pin_conflicts,
    check_speed_mix,
    check_vcco_consistency,
    group_assigned_by_bank,
)
from fpga_pinout.validation.rules import default_rule_table

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="module")
def rules():
    return default_rule_table()


# ---------------------------------------------------------------------------
# Pin conflicts
# ---------------------------------------------------------------------------

class TestPinConflicts:

    def test_duplicate_signal(self, rules, make_pin):
        pins = [
            make_pin("A1", signal_name="CLK"),
            make_pin("A2", signal_name=" CLK "),
            make_pin("A3", signal_name="DATA"),
        ]
        issues = check_pin_conflicts(pins, rules, NOW)
        assert len(issues) == 1
        issue = issues[0]
        assert issue.id == "conflict_CLK"
        assert issue.type == IssueType.PIN_CONFLICT
        assert issue.severity == Severity.ERROR
        assert issue.affected_pins == ["pin-A1", "pin-A2"]
        assert issue.timestamp == NOW
        assert "2 pins" in issue.description

    def test_power_and_ground_may_share_nets(self, rules, make_pin):
        pins = [
            make_pin("A1", "GND", signal_name="GND", pin_type=PinType.GROUND),
            make_pin("A2", "GND", signal_name="GND", pin_type=PinType.GROUND),
            make_pin("B1", "VCCO_34", signal_name="VCC3V3", pin_type=PinType.POWER),
            make_pin("B2", "VCCO_34", signal_name="VCC3V3", pin_type=PinType.POWER),
        ]
        assert check_pin_conflicts(pins, rules, NOW) == []

    def test_unassigned_ignored(self, rules, make_pin):
        assert check_pin_conflicts([make_pin("A1"), make_pin("A2")], rules, NOW) == []


# ---------------------------------------------------------------------------
# Differential pairs
# ---------------------------------------------------------------------------

class TestDifferentialPairs:

    def test_incomplete(self, rules, make_pin):
        pins = [make_pin("E3", "IO_L12P_T1_MRCC_35", bank="35")]
        issues = check_differential_pairs(pins, rules, NOW)
        assert [i.id for i in issues] == ["diff_pair_incomplete_pin-E3"]
        assert issues[0].severity == Severity.WARNING
        assert "negative" in issues[0].suggestion

    def test_complete_pair_is_checked_once(self, rules, make_pin):
        pins = [
            make_pin("A1", "IO_L1P_T0_34", bank="34"),
            make_pin("A2", "IO_L1N_T0_34", bank="14", voltage="1.8V"),
        ]
        issues = check_differential_pairs(pins, rules, NOW)
        assert [i.id for i in issues] == [
            "diff_pair_bank_mismatch_pin-A1_pin-A2",
            "diff_pair_voltage_mismatch_pin-A1_pin-A2",
        ]
        assert issues[0].severity == Severity.ERROR
        assert issues[1].severity == Severity.WARNING

    def test_lvds_halves_in_different_banks_are_incomplete(self, rules, make_pin):
        pins = [
            make_pin("A1", "IO_L1P_T0_14", bank="14"),
            make_pin("B1", "IO_L1N_T0_15", bank="15"),
        ]
        issues = check_differential_pairs(pins, rules, NOW)
        assert [i.id for i in issues] == [
            "diff_pair_incomplete_pin-A1",
            "diff_pair_incomplete_pin-B1",
        ]
        assert all(i.severity == Severity.WARNING for i in issues)

    def test_signal_names_must_pair(self, rules, make_pin):
        pins = [
            make_pin("A1", "IO_L1P_T0_34", signal_name="RX_P", bank="34"),
            make_pin("A2", "IO_L1N_T0_34", signal_name="TX_N", bank="34"),
        ]
        issues = check_differential_pairs(pins, rules, NOW)
        assert [i.id for i in issues] == ["diff_pair_signal_mismatch_pin-A1_pin-A2"]
        assert "RX_N" in issues[0].suggestion

    def test_one_side_assigned_is_info(self, rules, make_pin):
        pins = [
            make_pin("A1", "IO_L1P_T0_34", bank="34"),
            make_pin("A2", "IO_L1N_T0_34", signal_name="RX_N", bank="34"),
        ]
        issues = check_differential_pairs(pins, rules, NOW)
        assert len(issues) == 1
        assert issues[0].id == "diff_pair_incomplete_signal_pin-A1_pin-A2"
        assert issues[0].severity == Severity.INFO

    def test_consistent_pair_is_clean(self, rules, make_pin):
        pins = [
            make_pin("A1", signal_name="CLK_P", bank="10"),
            make_pin("A2", signal_name="CLK_N", bank="10"),
        ]
        assert check_differential_pairs(pins, rules, NOW) == []

    def test_ids_are_stable(self, rules, make_pin):
        pins = [make_pin("E3", "IO_L12P_T1_MRCC_35", bank="35")]
        first = check_differential_pairs(pins, rules)
        second = check_differential_pairs(pins, rules)
        assert [i.id for i in first] == [i.id for i in second]


# ---------------------------------------------------------------------------
# Bank constraints
# ---------------------------------------------------------------------------

class TestBankConstraints:

    def test_only_assigned_pins_with_bank(self, make_pin):
        pins = [
            make_pin("A1", signal_name="X", bank="1"),
            make_pin("A2", bank="1"),
            make_pin("A3", signal_name="Y"),
        ]
        assert {b: [p.id for p in m] for b, m in group_assigned_by_bank(pins).items()} == {
            "1": ["pin-A1"],
        }

    def test_vcco_mismatch(self, make_pin):
        members = [
            make_pin("A1", signal_name="A", bank="34", voltage="3.3V"),
            make_pin("A2", signal_name="B", bank="34", voltage="1.8V"),
            make_pin("A3", signal_name="C", bank="34", voltage="0V"),
        ]
        issues = check_vcco_consistency("34", members, NOW)
        assert [i.id for i in issues] == ["bank_vcco_34"]
        assert "3.3V, 1.8V" in issues[0].description

    def test_vcco_ignores_zero_volts(self, make_pin):
        members = [
            make_pin("A1", signal_name="A", voltage="3.3V"),
            make_pin("A2", signal_name="B", voltage="0V"),
        ]
        assert check_vcco_consistency("34", members, NOW) == []

    def test_io_standard_families(self, rules, make_pin):
        members = [
            make_pin("A1", signal_name="A", io_standard="LVCMOS33"),
            make_pin("A2", signal_name="B", io_standard="LVDS"),
            make_pin("A3", signal_name="C", io_standard="LVCMOS18"),
        ]
        issues = check_io_standard_compatibility("34", members, rules.io_families, NOW)
        assert [i.id for i in issues] == ["bank_iostd_34_single_ended_vs_differential"]
        assert issues[0].affected_pins == ["pin-A1", "pin-A2", "pin-A3"]

    def test_one_standard_ok(self, rules, make_pin):
        members = [make_pin("A1", signal_name="A", io_standard="LVDS")]
        assert check_io_standard_compatibility("34", members, rules.io_families, NOW) == []

    def test_clock_isolation(self, rules, make_pin):
        members = [
            make_pin("E3", "IO_L12P_T1_MRCC_35", signal_name="CLK100MHZ"),
            make_pin("A1", "IO_L1P_T0_35", signal_name="LED0"),
        ]
        issues = check_clock_isolation("35", members, rules, NOW)
        assert [i.id for i in issues] == ["bank_clock_isolation_35"]
        assert issues[0].affected_pins == ["pin-E3", "pin-A1"]

    def test_slow_clock_not_flagged(self, rules, make_pin):
        members = [
            make_pin("E3", "IO_L12P_T1_MRCC_35", signal_name="CLK12"),
            make_pin("A1", "IO_L1P_T0_35", signal_name="LED0"),
        ]
        assert check_clock_isolation("35", members, rules, NOW) == []

    def test_speed_mix(self, rules, make_pin):
        members = [
            make_pin("A1", signal_name="DDR_DQ0"),
            make_pin("A2", signal_name="DDR_DQ1"),
            make_pin("A3", signal_name="DDR_DQ2"),
            make_pin("B1", signal_name="LED0"),
            make_pin("B2", signal_name="GPIO1", io_standard="LVCMOS33"),
        ]
        issues = check_speed_mix("34", members, rules, NOW)
        assert [i.id for i in issues] == ["bank_speed_mix_34"]
        assert issues[0].affected_pins == ["pin-A1", "pin-A2", "pin-B1", "pin-B2"]
        assert "high-speed (3)" in issues[0].description

    def test_signal_pair_across_banks(self, rules, make_pin):
        # Each pin has its own package partner, so only the signal names join them
        pins = [
            make_pin("A1", "IO_L1P_T0_34", signal_name="DDR_CLK_P", bank="34", io_standard="LVDS"),
            make_pin("A2", "IO_L1N_T0_34", bank="34"),
            make_pin("B1", "IO_L2N_T0_35", signal_name="DDR_CLK_N", bank="35", io_standard="LVDS_25"),
            make_pin("B2", "IO_L2P_T0_35", bank="35"),
        ]
        ids = [i.id for i in check_bank_constraints(pins, rules, NOW)]
        assert ids == ["diff_pair_bank_cross_ddr_clk", "diff_pair_iostd_ddr_clk"]

    def test_split_pair_reported_once(self, rules, make_pin):
        pins = [
            make_pin("A1", "CLK_P", signal_name="CLK_P", bank="10"),
            make_pin("A2", "CLK_N", signal_name="CLK_N", bank="11"),
        ]
        assert check_bank_constraints(pins, rules, NOW) == []
        pair_errors = [
            i for i in check_differential_pairs(pins, rules, NOW) if i.severity == Severity.ERROR
        ]
        assert [i.id for i in pair_errors] == ["diff_pair_bank_mismatch_pin-A1_pin-A2"]

    def test_clean_bank(self, rules, make_pin):
        pins = [
            make_pin("A1", signal_name="CLK_P", bank="10", voltage="1.8V"),
            make_pin("A2", signal_name="CLK_N", bank="10", voltage="1.8V"),
        ]
        assert check_bank_constraints(pins, rules, NOW) == []
