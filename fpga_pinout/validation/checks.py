"""
Constraint checks over a pin set.

Each check is a pure function ``(pins, rules, timestamp) -> list[ValidationIssue]``.
Issue ids are derived from the finding itself (signal name, bank, pin
ids), never from the clock, so validating an unchanged pin set twice
yields the same ids.

Bank checks only look at pins that have both a bank and a signal: an
unassigned pin carries no electrical configuration yet.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from fpga_pinout.models import IssueType, Pin, PinType, Severity, ValidationIssue
from fpga_pinout.validation import diffpair
from fpga_pinout.validation.rules import IOFamilyConflict, RuleTable

logger = logging.getLogger(__name__)

_IGNORED_VOLTAGES = ("", "0V")
_SHARED_SIGNAL_TYPES = (PinType.POWER, PinType.GROUND)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _contains_any(text: str | None, keywords: Sequence[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(k.lower() in lowered for k in keywords)


def _issue(
    issue_id: str,
    issue_type: IssueType,
    severity: Severity,
    title: str,
    description: str,
    pins: Sequence[Pin],
    suggestion: str | None,
    timestamp: datetime | None,
) -> ValidationIssue:
    return ValidationIssue(
        id=issue_id,
        type=issue_type,
        severity=severity,
        title=title,
        description=description,
        affected_pins=[p.id for p in pins],
        suggestion=suggestion,
        auto_fixable=False,
        timestamp=timestamp or _now(),
    )


# ---------------------------------------------------------------------------
# Pin conflicts
# ---------------------------------------------------------------------------

def check_pin_conflicts(
    pins: Sequence[Pin],
    rules: RuleTable | None = None,
    timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    """One error per signal name bound to more than one pin.

    Power and ground pins legitimately share net names (``GND``) and are
    excluded.
    """
    groups: dict[str, list[Pin]] = {}
    for pin in pins:
        if not pin.is_assigned or pin.pin_type in _SHARED_SIGNAL_TYPES:
            continue
        groups.setdefault(pin.signal_name.strip(), []).append(pin)

    issues = []
    for signal, members in groups.items():
        if len(members) < 2:
            continue
        issues.append(_issue(
            f"conflict_{signal}",
            IssueType.PIN_CONFLICT,
            Severity.ERROR,
            "Pin Conflict",
            f'Signal "{signal}" is assigned to {len(members)} pins.',
            members,
            "Each signal should be assigned to only one pin.",
            timestamp,
        ))
    return issues


# ---------------------------------------------------------------------------
# Differential pairs
# ---------------------------------------------------------------------------

def check_differential_pairs(
    pins: Sequence[Pin],
    rules: RuleTable,
    timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    """Check every differential half against its partner.

    Each unordered pair is examined once, from the side that appears
    first in *pins*.
    """
    diff = rules.differential
    issues: list[ValidationIssue] = []
    seen: set[frozenset[str]] = set()

    for pin in pins:
        sign = diffpair.polarity(pin.pin_name, diff) or diffpair.polarity(pin.signal_name, diff)
        if sign is None:
            continue
        label = diffpair.base_name(pin.pin_name, diff) or pin.pin_name
        partner = diffpair.find_partner(pin, pins, diff)

        if partner is None:
            other_side = "negative" if sign == diffpair.POSITIVE else "positive"
            issues.append(_issue(
                f"diff_pair_incomplete_{pin.id}",
                IssueType.DIFFERENTIAL_PAIR,
                Severity.WARNING,
                f"Incomplete differential pair: {label}",
                f"Pin {pin.pin_number} ({pin.pin_name}) has no differential pair partner.",
                [pin],
                f"Find and assign the {other_side} side pin in the same bank.",
                timestamp,
            ))
            continue

        key = frozenset((pin.id, partner.id))
        if key in seen:
            continue
        seen.add(key)
        issues.extend(_check_pair(pin, partner, label, rules, timestamp))

    return issues


def _check_pair(
    pin: Pin,
    partner: Pin,
    label: str,
    rules: RuleTable,
    timestamp: datetime | None,
) -> list[ValidationIssue]:
    pair_id = f"{pin.id}_{partner.id}"
    issues = []

    if pin.bank != partner.bank:
        issues.append(_issue(
            f"diff_pair_bank_mismatch_{pair_id}",
            IssueType.DIFFERENTIAL_PAIR,
            Severity.ERROR,
            f"Differential pair bank mismatch: {label}",
            f"Differential pair pins are in different banks. Pin {pin.pin_number} "
            f"(Bank {pin.bank}) and Pin {partner.pin_number} (Bank {partner.bank})",
            [pin, partner],
            "Differential pair pins should be placed in the same bank.",
            timestamp,
        ))

    if pin.voltage != partner.voltage:
        issues.append(_issue(
            f"diff_pair_voltage_mismatch_{pair_id}",
            IssueType.DIFFERENTIAL_PAIR,
            Severity.WARNING,
            f"Differential pair voltage mismatch: {label}",
            f"Differential pair pins have different voltages. Pin {pin.pin_number} "
            f"({pin.voltage}) and Pin {partner.pin_number} ({partner.voltage})",
            [pin, partner],
            "Differential pair pins should be set to the same voltage level.",
            timestamp,
        ))

    if pin.is_assigned and partner.is_assigned:
        expected = diffpair.inverse_name(pin.signal_name, rules.differential)
        if expected and expected.lower() != partner.signal_name.strip().lower():
            issues.append(_issue(
                f"diff_pair_signal_mismatch_{pair_id}",
                IssueType.DIFFERENTIAL_PAIR,
                Severity.WARNING,
                f"Differential pair signal name mismatch: {label}",
                f'Signal names do not form a pair: "{pin.signal_name}" and '
                f'"{partner.signal_name}"',
                [pin, partner],
                f'Name the signals as a pair (e.g. "{pin.signal_name}" and "{expected}").',
                timestamp,
            ))
    elif pin.is_assigned != partner.is_assigned:
        assigned, missing = (pin, partner) if pin.is_assigned else (partner, pin)
        issues.append(_issue(
            f"diff_pair_incomplete_signal_{pair_id}",
            IssueType.DIFFERENTIAL_PAIR,
            Severity.INFO,
            f"Differential pair assigned on one side only: {label}",
            f'Pin {assigned.pin_number} carries signal "{assigned.signal_name}" but its '
            f"partner pin {missing.pin_number} has no signal.",
            [pin, partner],
            "Consider assigning the matching signal to the partner pin.",
            timestamp,
        ))
    return issues


# ---------------------------------------------------------------------------
# Bank constraints
# ---------------------------------------------------------------------------

def group_assigned_by_bank(pins: Sequence[Pin]) -> dict[str, list[Pin]]:
    """Assigned pins with a bank, grouped by bank in first-seen order."""
    banks: dict[str, list[Pin]] = {}
    for pin in pins:
        if pin.bank and pin.is_assigned:
            banks.setdefault(pin.bank, []).append(pin)
    return banks


def check_bank_constraints(
    pins: Sequence[Pin],
    rules: RuleTable,
    timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    """Per-bank electrical checks plus the signal-named pair check."""
    banks = group_assigned_by_bank(pins)
    logger.debug("Checking %d banks with assigned pins", len(banks))
    issues: list[ValidationIssue] = []
    for bank, members in banks.items():
        issues.extend(check_vcco_consistency(bank, members, timestamp))
        issues.extend(check_io_standard_compatibility(bank, members, rules.io_families, timestamp))
        issues.extend(check_clock_isolation(bank, members, rules, timestamp))
        issues.extend(check_speed_mix(bank, members, rules, timestamp))
    issues.extend(check_signal_pair_banks(pins, rules, timestamp))
    return issues


def check_vcco_consistency(
    bank: str, members: Sequence[Pin], timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    voltages = list(dict.fromkeys(
        p.voltage for p in members if p.voltage not in _IGNORED_VOLTAGES
    ))
    if len(voltages) <= 1:
        return []
    return [_issue(
        f"bank_vcco_{bank}",
        IssueType.BANK_CONSTRAINT,
        Severity.ERROR,
        f"VCCO voltage mismatch in Bank {bank}",
        f"Bank {bank} contains pins with different VCCO voltages: {', '.join(voltages)}. "
        "All pins in a bank must share the same VCCO.",
        members,
        "Configure all pins in the same bank to use the same VCCO voltage level.",
        timestamp,
    )]


def check_io_standard_compatibility(
    bank: str,
    members: Sequence[Pin],
    families: Sequence[IOFamilyConflict],
    timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    standards = list(dict.fromkeys(p.io_standard for p in members if p.io_standard))
    if len(standards) <= 1:
        return []

    issues = []
    for family in families:
        if not (set(standards) & set(family.group_a) and set(standards) & set(family.group_b)):
            continue
        involved = set(family.group_a) | set(family.group_b)
        issues.append(_issue(
            f"bank_iostd_{bank}_{family.name}",
            IssueType.BANK_CONSTRAINT,
            Severity.ERROR,
            f"Incompatible I/O standards in Bank {bank}",
            f"{family.reason}. Found: {', '.join(standards)}",
            [p for p in members if p.io_standard in involved],
            "Separate incompatible I/O standards into different banks.",
            timestamp,
        ))
    return issues


def check_signal_pair_banks(
    pins: Sequence[Pin], rules: RuleTable, timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    """Signal-named pairs (``DDR_CLK_P``/``DDR_CLK_N``) must share bank and standard.

    A bank split is only reported here when partner lookup does not
    already join the two pins, otherwise ``check_differential_pairs``
    has reported it.
    """
    diff = rules.differential
    pairs: dict[str, list[Pin]] = {}
    for pin in pins:
        if not (pin.bank and pin.is_assigned):
            continue
        base = diffpair.base_name(pin.signal_name, rules.differential)
        if base:
            pairs.setdefault(base.lower(), []).append(pin)

    issues = []
    for base, members in pairs.items():
        if len(members) != 2:
            continue
        first, second = members
        joined = (
            diffpair.find_partner(first, pins, diff) is second
            or diffpair.find_partner(second, pins, diff) is first
        )
        if first.bank != second.bank and not joined:
            issues.append(_issue(
                f"diff_pair_bank_cross_{base}",
                IssueType.DIFFERENTIAL_PAIR,
                Severity.ERROR,
                "Differential pair crosses bank boundary",
                f'Differential pair "{base}" has pins in different banks: {first.pin_number} '
                f"(Bank {first.bank}) and {second.pin_number} (Bank {second.bank})",
                members,
                "Place both pins of a differential pair in the same bank.",
                timestamp,
            ))
        if first.io_standard and second.io_standard and first.io_standard != second.io_standard:
            issues.append(_issue(
                f"diff_pair_iostd_{base}",
                IssueType.DIFFERENTIAL_PAIR,
                Severity.ERROR,
                "Differential pair I/O standard mismatch",
                f'Differential pair "{base}" has mismatched I/O standards: '
                f"{first.io_standard} vs {second.io_standard}",
                members,
                "Use the same I/O standard for both pins in a differential pair.",
                timestamp,
            ))
    return issues


def _is_special(pin: Pin, rules: RuleTable) -> bool:
    if pin.pin_type.value in rules.clock.special_pin_types:
        return True
    capable = rules.clock.clock_capable_regex
    return bool(capable is not None and capable.search(pin.pin_name))


def check_clock_isolation(
    bank: str, members: Sequence[Pin], rules: RuleTable, timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    clock = rules.clock
    special = [p for p in members if _is_special(p, rules)]
    regular = [p for p in members if not _is_special(p, rules)]
    if not special or not regular:
        return []

    high_speed = [
        p for p in special
        if _contains_any(p.signal_name, clock.signal_keywords)
        and (
            _contains_any(p.signal_name, clock.high_speed_markers)
            or _contains_any(p.io_standard, clock.high_speed_standards)
        )
    ]
    if not high_speed:
        return []
    return [_issue(
        f"bank_clock_isolation_{bank}",
        IssueType.BANK_CONSTRAINT,
        Severity.WARNING,
        f"High-speed clocks mixed with regular I/O in Bank {bank}",
        "High-speed clock signals may cause noise coupling with regular I/O signals",
        high_speed + regular[: clock.regular_pins_reported],
        "Consider isolating high-speed clock signals in dedicated banks.",
        timestamp,
    )]


def check_speed_mix(
    bank: str, members: Sequence[Pin], rules: RuleTable, timestamp: datetime | None = None,
) -> list[ValidationIssue]:
    speed = rules.speed
    high = [
        p for p in members
        if _contains_any(p.signal_name, speed.high_speed_signals)
        or _contains_any(p.io_standard, speed.high_speed_standards)
    ]
    high_ids = {p.id for p in high}
    low = [
        p for p in members
        if p.id not in high_ids and (
            _contains_any(p.signal_name, speed.low_speed_signals)
            or _contains_any(p.io_standard, speed.low_speed_standards)
        )
    ]
    if not high or not low:
        return []
    shown = speed.pins_reported
    return [_issue(
        f"bank_speed_mix_{bank}",
        IssueType.BANK_CONSTRAINT,
        Severity.WARNING,
        f"Mixed signal speeds in Bank {bank}",
        f"Bank {bank} contains both high-speed ({len(high)}) and low-speed ({len(low)}) signals",
        high[:shown] + low[:shown],
        "Consider grouping signals by speed to minimize noise coupling.",
        timestamp,
    )]
