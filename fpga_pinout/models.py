"""
Core records for fpga-pinout.

Pins, packages and validation findings are plain dataclasses: they are
produced by the importer / validator and consumed by external
collaborators (a pin-assignment UI, a renderer).  Enumerations are
``str``-valued so that ``PinType.POWER == "POWER"`` and values serialize
naturally.

Lifecycle rules:
- A ``Pin`` is created once per accepted input row.  Its ``id`` and grid
  address never change; ``signal_name`` is the only field collaborators
  overwrite.  ``is_assigned`` is derived, never stored.
- A ``Package`` is built once per import and replaced wholesale by the
  next import.
- ``ValidationIssue`` / ``ValidationResult`` are recomputed on every
  validation pass, never patched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PinDirection(str, Enum):
    INPUT = "Input"
    OUTPUT = "Output"
    INOUT = "InOut"
    POWER = "Power"
    GROUND = "Ground"
    CLOCK = "Clock"
    RESET = "Reset"
    UNSPECIFIED = "Unspecified"


class PinType(str, Enum):
    IO = "IO"
    CONFIG = "CONFIG"
    POWER = "POWER"
    GROUND = "GROUND"
    MGT = "MGT"
    CLOCK = "CLOCK"
    ADC = "ADC"
    SPECIAL = "SPECIAL"
    NC = "NC"
    RESERVED = "RESERVED"


class IssueType(str, Enum):
    PIN_CONFLICT = "pin_conflict"
    DIFFERENTIAL_PAIR = "differential_pair"
    BANK_CONSTRAINT = "bank_constraint"
    CLOCK_CONSTRAINT = "clock_constraint"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Higher is more severe."""
        return {"error": 3, "warning": 2, "info": 1}[self.value]


@dataclass(frozen=True)
class GridPosition:
    """A (row label, column) address on the package ball matrix."""
    row: str
    col: int

    @property
    def row_index(self) -> int:
        from fpga_pinout.grid import row_to_index

        return row_to_index(self.row)

    @property
    def label(self) -> str:
        return f"{self.row}{self.col}"


@dataclass(frozen=True)
class Position:
    """Pixel position derived from a GridPosition and the tile spacing."""
    x: int
    y: int


@dataclass
class Pin:
    """One physical package contact.

    Attributes:
        id: Opaque identifier, generated once by the builder.
        pin_number: Physical label (e.g. ``"AB12"``).
        pin_name: Functional name from the vendor file; defaults to
            ``pin_number``.
        signal_name: Net bound to the pin; empty when unassigned.
        direction: Direction mapped from the vendor's free text.
        pin_type: Category inferred from ``pin_name``.
        voltage: Supply/IO voltage string, ``"3.3V"`` when unknown.
        package_pin: Package-specific designation (same as ``pin_number``).
        grid_position: Decoded address; always present on a stored Pin.
        position: Pixel position for renderers.
        bank: Bank identifier, passed through verbatim.
        memory_byte_group: Vendor passthrough (Xilinx).
        io_type: Vendor passthrough (``HR``, ``HP``, ...).
        attributes: Extra vendor columns, e.g. ``io_standard``.
    """
    id: str
    pin_number: str
    pin_name: str
    signal_name: str
    direction: PinDirection
    pin_type: PinType
    voltage: str
    package_pin: str
    grid_position: GridPosition
    position: Position
    bank: str | None = None
    memory_byte_group: str | None = None
    io_type: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_assigned(self) -> bool:
        return bool(self.signal_name and self.signal_name.strip())

    @property
    def io_standard(self) -> str | None:
        return self.attributes.get("io_standard") or None


@dataclass
class Package:
    """Package-level view of one imported pin set."""
    id: str
    name: str
    device: str
    package_type: str
    rows: int
    cols: int
    pins: list[Pin] = field(default_factory=list)

    @property
    def total_pins(self) -> int:
        return len(self.pins)

    @property
    def dimensions(self) -> dict[str, int]:
        return {"rows": self.rows, "cols": self.cols}


@dataclass
class PinoutFormat:
    """How the importer understood the input.

    Attributes:
        type: ``"xilinx"``, ``"quartus"``, ``"generic"`` or ``"custom"``.
        has_header: Whether a header line was located.
        delimiter: Field delimiter used for tokenizing.
        comment_prefix: Comment marker of the dialect.
        expected_columns: The dialect's reference column names.
    """
    type: str = "generic"
    has_header: bool = True
    delimiter: str = ","
    comment_prefix: str = "#"
    expected_columns: list[str] = field(default_factory=list)


@dataclass
class ImportResult:
    """Outcome of ``import_pins()``.

    ``success`` is True iff at least one pin was decoded.  On failure
    ``pins`` is always empty -- no partial pin set is returned.
    """
    success: bool
    pins: list[Pin] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    format: PinoutFormat = field(default_factory=PinoutFormat)


@dataclass
class ValidationIssue:
    """One typed, severity-tagged finding."""
    id: str
    type: IssueType
    severity: Severity
    title: str
    description: str
    affected_pins: list[str] = field(default_factory=list)
    suggestion: str | None = None
    auto_fixable: bool = False
    timestamp: datetime | None = None


@dataclass
class ValidationSummary:
    total_issues: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0


@dataclass
class ValidationResult:
    """All findings of one validation pass, in check order."""
    issues: list[ValidationIssue] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)
    last_checked: datetime | None = None

    @property
    def has_errors(self) -> bool:
        return self.summary.error_count > 0

    def issues_for_pin(self, pin_id: str) -> list[ValidationIssue]:
        return [i for i in self.issues if pin_id in i.affected_pins]

    def issues_by_type(self, issue_type: IssueType | str) -> list[ValidationIssue]:
        return [i for i in self.issues if i.type == issue_type]

    def issues_by_severity(self, severity: Severity | str) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    def most_severe_for_pin(self, pin_id: str) -> ValidationIssue | None:
        """The first issue of the highest severity touching *pin_id*."""
        best: ValidationIssue | None = None
        for issue in self.issues_for_pin(pin_id):
            if best is None or issue.severity.rank > best.severity.rank:
                best = issue
        return best
