"""
Validation orchestrator for fpga-pinout.

``Validator`` runs the enabled constraint checks over a pin set, counts
the findings by severity and notifies its listeners.  It holds no state
between passes except its listener list and the fingerprint of the last
pin set it validated (used by ``validate_if_changed``).

Typical use by an editor that re-validates after every signal edit::

    validator = Validator()
    handle = validator.add_listener(panel.show)
    validator.validate_if_changed(pins)   # runs
    validator.validate_if_changed(pins)   # skipped: nothing changed
    validator.remove_listener(handle)
"""

from __future__ import annotations

import asyncio
import hashlib
import itertools
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from fpga_pinout.config import ValidationSettings
from fpga_pinout.models import Package, Pin, Severity, ValidationIssue, ValidationResult, ValidationSummary
from fpga_pinout.validation.checks import (
    check_bank_constraints,
    check_differential_pairs,
    check_pin_conflicts,
)
from fpga_pinout.validation.rules import RuleTable, default_rule_table, load_rule_table

logger = logging.getLogger(__name__)

Listener = Callable[[ValidationResult], None]


@dataclass(frozen=True)
class ListenerHandle:
    """Opaque token returned by ``add_listener``."""
    token: int


def summarize(issues: Sequence[ValidationIssue]) -> ValidationSummary:
    """Count issues by severity in a single pass."""
    summary = ValidationSummary(total_issues=len(issues))
    for issue in issues:
        if issue.severity == Severity.ERROR:
            summary.error_count += 1
        elif issue.severity == Severity.WARNING:
            summary.warning_count += 1
        elif issue.severity == Severity.INFO:
            summary.info_count += 1
    return summary


def fingerprint(pins: Sequence[Pin]) -> str:
    """Hash of the fields that can change a validation outcome."""
    digest = hashlib.sha256()
    for pin in pins:
        for value in (pin.id, pin.signal_name, pin.bank, pin.voltage, pin.pin_name):
            digest.update((value or "").encode("utf-8"))
            digest.update(b"\x1f")
        digest.update(b"\x1e")
    return digest.hexdigest()


class Validator:
    """Runs constraint checks and notifies listeners.

    Args:
        rules: Rule table; defaults to the table named by
            ``settings.rules_path`` or the built-in one.
        settings: Which checks run.
    """

    def __init__(
        self,
        rules: RuleTable | None = None,
        settings: ValidationSettings | None = None,
    ) -> None:
        self.settings = settings or ValidationSettings()
        if rules is None:
            rules = (
                load_rule_table(self.settings.rules_path)
                if self.settings.rules_path
                else default_rule_table()
            )
        self.rules = rules
        self._listeners: dict[int, Listener] = {}
        self._tokens = itertools.count(1)
        self._last_pins: Sequence[Pin] | None = None
        self._last_fingerprint: str | None = None

    # -- listeners ---------------------------------------------------------

    def add_listener(self, callback: Listener) -> ListenerHandle:
        handle = ListenerHandle(next(self._tokens))
        self._listeners[handle.token] = callback
        return handle

    def remove_listener(self, handle: ListenerHandle) -> bool:
        """Unregister a listener; False if the handle was not registered."""
        return self._listeners.pop(handle.token, None) is not None

    def _notify(self, result: ValidationResult) -> None:
        for callback in list(self._listeners.values()):
            callback(result)

    # -- validation --------------------------------------------------------

    def run_checks(self, pins: Sequence[Pin]) -> list[ValidationIssue]:
        """Concatenate the enabled checks' findings, in check order."""
        now = datetime.now(timezone.utc)
        issues: list[ValidationIssue] = []
        if self.settings.check_pin_conflicts:
            issues.extend(check_pin_conflicts(pins, self.rules, now))
        if self.settings.check_differential_pairs:
            issues.extend(check_differential_pairs(pins, self.rules, now))
        if self.settings.check_bank_constraints:
            issues.extend(check_bank_constraints(pins, self.rules, now))
        return issues

    def validate(
        self,
        pins: Sequence[Pin],
        package: Package | None = None,
    ) -> ValidationResult:
        """Validate *pins* and notify listeners.

        *package* is accepted for callers that hold one; the checks only
        need the pins.
        """
        issues = self.run_checks(pins)
        result = ValidationResult(
            issues=issues,
            summary=summarize(issues),
            last_checked=datetime.now(timezone.utc),
        )
        self._last_pins = pins
        self._last_fingerprint = fingerprint(pins)
        logger.info(
            "Validated %d pins%s: %d errors, %d warnings, %d info",
            len(pins),
            f" of package '{package.name}'" if package is not None else "",
            result.summary.error_count,
            result.summary.warning_count,
            result.summary.info_count,
        )
        self._notify(result)
        return result

    async def validate_async(
        self,
        pins: Sequence[Pin],
        package: Package | None = None,
    ) -> ValidationResult:
        """Same as ``validate``, after yielding once to the event loop."""
        await asyncio.sleep(0)
        return self.validate(pins, package)

    def validate_if_changed(
        self,
        pins: Sequence[Pin],
        package: Package | None = None,
    ) -> ValidationResult | None:
        """Validate only if the pin list or its fingerprint changed.

        Returns None when the previous result still applies.
        """
        if pins is self._last_pins and fingerprint(pins) == self._last_fingerprint:
            logger.debug("Pin set unchanged; skipping validation")
            return None
        return self.validate(pins, package)


def validate_pins(
    pins: Sequence[Pin],
    package: Package | None = None,
    rules: RuleTable | None = None,
) -> ValidationResult:
    """One-shot validation with default settings."""
    return Validator(rules=rules).validate(pins, package)
