"""Constraint validation over imported pin sets."""

from fpga_pinout.validation.orchestrator import (
    ListenerHandle,
    Validator,
    fingerprint,
    summarize,
    validate_pins,
)
from fpga_pinout.validation.rules import RuleTable, default_rule_table, load_rule_table

__all__ = [
    "ListenerHandle",
    "RuleTable",
    "Validator",
    "default_rule_table",
    "fingerprint",
    "load_rule_table",
    "summarize",
    "validate_pins",
]
