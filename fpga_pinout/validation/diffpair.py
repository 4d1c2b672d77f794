"""
Differential pair naming helpers.

A name is a differential half when it carries a polarity marker from the
rule table: a suffix pair (``_P``/``_N``, ``+``/``-``), a bare ``P``/``N``
after a digit, ``_`` or ``-``, or the LVDS ``..._L<n>P/N[_suffix]``
pattern.  The inverse transform swaps the marker and keeps the rest of
the name (and the marker's case) intact.
"""

from __future__ import annotations

from collections.abc import Sequence

from fpga_pinout.models import Pin
from fpga_pinout.validation.rules import DifferentialRules

POSITIVE = "positive"
NEGATIVE = "negative"


def _swap_suffix(name: str, suffix_len: int, target: str) -> str:
    original = name[len(name) - suffix_len:]
    replacement = target if original == original.upper() else target.lower()
    return name[: len(name) - suffix_len] + replacement


def polarity(name: str | None, rules: DifferentialRules) -> str | None:
    """``"positive"``, ``"negative"`` or None for a non-differential name."""
    if not name:
        return None
    lowered = name.strip().lower()
    for pair in rules.suffix_pairs:
        if lowered.endswith(pair.positive.lower()):
            return POSITIVE
        if lowered.endswith(pair.negative.lower()):
            return NEGATIVE

    single = rules.single_letter_regex
    if single is not None:
        match = single.search(lowered)
        if match:
            return POSITIVE if match.group(1) == rules.single_letter.positive.lower() else NEGATIVE

    lvds = lvds_parts(name, rules)
    if lvds is not None:
        return lvds[1]
    return None


def lvds_parts(name: str, rules: DifferentialRules) -> tuple[str, str, str] | None:
    """Split an LVDS-style name into (lower-cased base, polarity, suffix)."""
    regex = rules.lvds_regex
    if regex is None:
        return None
    match = regex.match(name.strip())
    if match is None:
        return None
    sign = POSITIVE if match.group(2).upper() == "P" else NEGATIVE
    return match.group(1).lower(), sign, match.group(3) or ""


def inverse_name(name: str | None, rules: DifferentialRules) -> str | None:
    """The partner's expected name, or None when *name* is not a half."""
    if not name:
        return None
    name = name.strip()
    lowered = name.lower()
    for pair in rules.suffix_pairs:
        if lowered.endswith(pair.positive.lower()):
            return _swap_suffix(name, len(pair.positive), pair.negative)
        if lowered.endswith(pair.negative.lower()):
            return _swap_suffix(name, len(pair.negative), pair.positive)

    single = rules.single_letter_regex
    if single is not None and single.search(lowered):
        letter = rules.single_letter
        target = letter.negative if lowered[-1] == letter.positive.lower() else letter.positive
        return _swap_suffix(name, 1, target)

    regex = rules.lvds_regex
    if regex is not None:
        match = regex.match(name)
        if match:
            sign = match.group(2)
            flipped = "N" if sign.upper() == "P" else "P"
            if sign.islower():
                flipped = flipped.lower()
            return f"{match.group(1)}{flipped}{match.group(3) or ''}"
    return None


def base_name(name: str | None, rules: DifferentialRules) -> str | None:
    """Name with its suffix-pair or single-letter marker removed."""
    if not name:
        return None
    name = name.strip()
    lowered = name.lower()
    for pair in rules.suffix_pairs:
        for suffix in (pair.positive, pair.negative):
            if lowered.endswith(suffix.lower()):
                return name[: len(name) - len(suffix)]
    single = rules.single_letter_regex
    if single is not None and single.search(lowered):
        return name[:-1]
    return None


def is_differential(pin: Pin, rules: DifferentialRules) -> bool:
    return polarity(pin.pin_name, rules) is not None or polarity(pin.signal_name, rules) is not None


def _prefer_bank(candidates: list[Pin], bank: str | None) -> Pin | None:
    for candidate in candidates:
        if candidate.bank == bank:
            return candidate
    return candidates[0] if candidates else None


def find_partner(pin: Pin, pins: Sequence[Pin], rules: DifferentialRules) -> Pin | None:
    """Find the other half of *pin*'s pair.

    Searched in order: the inverse of the pin name, the LVDS base name
    with opposite polarity, then the inverse of the signal name.  The
    inverse-name searches prefer a partner in the same bank but still
    return one from another bank so a bank mismatch can be reported.
    The LVDS base omits the bank suffix, so that search stays inside
    the pin's own bank.
    """
    others = [p for p in pins if p.id != pin.id]

    expected = inverse_name(pin.pin_name, rules)
    if expected:
        target = expected.lower()
        found = _prefer_bank([p for p in others if p.pin_name.lower() == target], pin.bank)
        if found is not None:
            return found

    parts = lvds_parts(pin.pin_name, rules)
    if parts is not None:
        base, sign, _suffix = parts
        for p in others:
            if p.bank != pin.bank:
                continue
            other = lvds_parts(p.pin_name, rules)
            if other is not None and other[0] == base and other[1] != sign:
                return p

    if pin.is_assigned:
        expected = inverse_name(pin.signal_name, rules)
        if expected:
            target = expected.lower()
            found = _prefer_bank(
                [p for p in others if p.signal_name.strip().lower() == target], pin.bank,
            )
            if found is not None:
                return found
    return None
