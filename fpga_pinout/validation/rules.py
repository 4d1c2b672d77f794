"""
Validation rule table for fpga-pinout.

The differential naming conventions, the incompatible I/O-standard
families and the clock/speed keyword heuristics are data, not code.
They are declared in ``validation/rules/default.yaml`` and loaded into
Pydantic models; a project can replace the table with its own YAML file
(``ValidationSettings.rules_path``) without touching the checks.

Regular expressions are checked when the table is loaded, so a bad
pattern fails at load time with ``RuleTableError`` instead of during a
validation pass.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from fpga_pinout.exceptions import RuleTableError

logger = logging.getLogger(__name__)

_DEFAULT_RULES = Path(__file__).parent / "rules" / "default.yaml"


def _check_pattern(pattern: str | None, label: str) -> None:
    if pattern is None:
        return
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"Invalid {label} '{pattern}': {exc}") from exc


class SuffixPair(BaseModel):
    positive: str
    negative: str


class SingleLetterRule(BaseModel):
    positive: str = "P"
    negative: str = "N"
    preceded_by: str = Field("0-9_-", description="Regex character-class body")

    @property
    def pattern(self) -> str:
        return rf"(?<=[{self.preceded_by}])([{self.positive}{self.negative}])$"


class DifferentialRules(BaseModel):
    suffix_pairs: list[SuffixPair] = Field(default_factory=list)
    single_letter: SingleLetterRule | None = None
    lvds_pattern: str | None = None

    @model_validator(mode="after")
    def _check_patterns(self) -> DifferentialRules:
        _check_pattern(self.lvds_pattern, "lvds_pattern")
        if self.single_letter is not None:
            _check_pattern(self.single_letter.pattern, "single_letter rule")
        return self

    @property
    def lvds_regex(self) -> re.Pattern[str] | None:
        if not self.lvds_pattern:
            return None
        return re.compile(self.lvds_pattern, re.IGNORECASE)

    @property
    def single_letter_regex(self) -> re.Pattern[str] | None:
        if self.single_letter is None:
            return None
        return re.compile(self.single_letter.pattern, re.IGNORECASE)


class IOFamilyConflict(BaseModel):
    """Two groups of I/O standards that cannot share one bank."""
    name: str
    group_a: list[str]
    group_b: list[str]
    reason: str


class ClockRules(BaseModel):
    special_pin_types: list[str] = Field(default_factory=lambda: ["CLOCK", "CONFIG"])
    clock_capable_pattern: str | None = None
    signal_keywords: list[str] = Field(default_factory=list)
    high_speed_markers: list[str] = Field(default_factory=list)
    high_speed_standards: list[str] = Field(default_factory=list)
    regular_pins_reported: int = 3

    @model_validator(mode="after")
    def _check_patterns(self) -> ClockRules:
        _check_pattern(self.clock_capable_pattern, "clock_capable_pattern")
        return self

    @property
    def clock_capable_regex(self) -> re.Pattern[str] | None:
        if not self.clock_capable_pattern:
            return None
        return re.compile(self.clock_capable_pattern, re.IGNORECASE)


class SpeedRules(BaseModel):
    high_speed_signals: list[str] = Field(default_factory=list)
    high_speed_standards: list[str] = Field(default_factory=list)
    low_speed_signals: list[str] = Field(default_factory=list)
    low_speed_standards: list[str] = Field(default_factory=list)
    pins_reported: int = 2


class RuleTable(BaseModel):
    """Complete rule table used by the constraint checks."""
    differential: DifferentialRules = Field(default_factory=DifferentialRules)
    io_families: list[IOFamilyConflict] = Field(default_factory=list)
    clock: ClockRules = Field(default_factory=ClockRules)
    speed: SpeedRules = Field(default_factory=SpeedRules)


def load_rule_table(path: str | Path | None = None) -> RuleTable:
    """Load a rule table YAML file (the built-in table when *path* is None).

    Raises:
        RuleTableError: If the file is missing, empty or malformed.
    """
    path = Path(path) if path is not None else _DEFAULT_RULES
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise RuleTableError(f"Cannot read rule table {path}: {exc}") from exc
    if not raw:
        raise RuleTableError(f"Rule table is empty: {path}")
    try:
        table = RuleTable.model_validate(raw)
    except ValidationError as exc:
        raise RuleTableError(f"Invalid rule table {path}: {exc}") from exc
    logger.debug(
        "Loaded rule table from %s (%d I/O family rules)", path, len(table.io_families)
    )
    return table


_default_table: RuleTable | None = None


def default_rule_table() -> RuleTable:
    """The packaged rule table, parsed once and shared."""
    global _default_table
    if _default_table is None:
        _default_table = load_rule_table(None)
    return _default_table
