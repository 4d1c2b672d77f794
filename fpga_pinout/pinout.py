"""
Pinout handle for fpga-pinout.

The ``Pinout`` class is a **handle object** holding one imported pin
set, its package and the configuration used to import it.  Once
created (via ``fpga_pinout.open()`` or ``Pinout.from_bytes()``), callers
edit signal assignments and re-validate through it without passing the
pin list around.

Design rationale:
- **Handle pattern**: the pins, package, detected format and import
  warnings are captured once.
- **One validator per handle**: listeners registered on
  ``pinout.validator`` see every ``validate()`` call made through the
  handle.
- **Cheap summary**: ``describe()`` aggregates bank utilization without
  running validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fpga_pinout._pipeline import run_import
from fpga_pinout.config import PinoutConfig
from fpga_pinout.exceptions import ImportFailedError
from fpga_pinout.models import ImportResult, Package, Pin, PinoutFormat, ValidationResult
from fpga_pinout.package import BankSummary, bank_statistics, create_package
from fpga_pinout.validation import Validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PinoutInfo -- lightweight summary snapshot
# ---------------------------------------------------------------------------

@dataclass
class PinoutInfo:
    """Structured summary of a pinout, returned by ``Pinout.describe()``.

    Attributes:
        name: Package name given at import.
        format_type: Detected format (``xilinx``, ``quartus``, ...).
        total_pins: Number of imported pins.
        assigned_pins: Pins with a signal bound.
        dimensions: ``{"rows": ..., "cols": ...}`` of the package grid.
        banks: Per-bank utilization.
        warning_count: Rows skipped during import.
        source: File the pins were read from, when known.
    """

    name: str
    format_type: str
    total_pins: int
    assigned_pins: int
    dimensions: dict[str, int] = field(default_factory=dict)
    banks: BankSummary | None = None
    warning_count: int = 0
    source: str | None = None


# ---------------------------------------------------------------------------
# Pinout -- the main handle class
# ---------------------------------------------------------------------------

class Pinout:
    """Handle object for one imported pin set.

    Attributes:
        result: The ``ImportResult`` the handle was built from.
        package: Package aggregated from the imported pins.
        config: Configuration used for import and validation.
        validator: Validator reused by ``validate()``.
        source: Source file path, when opened from disk.
    """

    def __init__(
        self,
        result: ImportResult,
        package: Package,
        config: PinoutConfig | None = None,
        source: str | Path | None = None,
    ) -> None:
        self.result = result
        self.package = package
        self.config = config or PinoutConfig()
        self.validator = Validator(settings=self.config.validation)
        self.source = Path(source) if source is not None else None
        self._by_id = {p.id: p for p in package.pins}

    @classmethod
    def from_bytes(
        cls,
        data: bytes | str,
        name: str = "Unknown",
        config: PinoutConfig | None = None,
        source: str | Path | None = None,
    ) -> Pinout:
        """Import *data* and wrap it in a handle.

        Raises:
            ImportFailedError: If no pins could be imported.
        """
        config = config or PinoutConfig()
        result = run_import(data, name=name, config=config)
        if not result.success:
            raise ImportFailedError("; ".join(result.errors))
        package = create_package(result.pins, name)
        return cls(result, package, config, source)

    # -- Properties ---------------------------------------------------------

    @property
    def pins(self) -> list[Pin]:
        return self.package.pins

    @property
    def format(self) -> PinoutFormat:
        return self.result.format

    @property
    def warnings(self) -> list[str]:
        return self.result.warnings

    def __repr__(self) -> str:
        return (
            f"Pinout(name={self.package.name!r}, format={self.format.type!r}, "
            f"pins={len(self.pins)})"
        )

    # -- Editing ------------------------------------------------------------

    def get_pin(self, pin_id: str) -> Pin:
        """Look up a pin by id.

        Raises:
            KeyError: If no pin has that id.
        """
        try:
            return self._by_id[pin_id]
        except KeyError:
            raise KeyError(f"Unknown pin id: '{pin_id}'") from None

    def find_pin(self, pin_number: str) -> Pin | None:
        """The pin at a package location (``"AB12"``), case-insensitive."""
        target = pin_number.strip().upper()
        return next((p for p in self.pins if p.pin_number.upper() == target), None)

    def assign_signal(self, pin_id: str, signal_name: str) -> Pin:
        """Bind *signal_name* to a pin; an empty string unassigns it."""
        pin = self.get_pin(pin_id)
        pin.signal_name = signal_name.strip()
        logger.debug("Assigned '%s' to pin %s", pin.signal_name, pin.pin_number)
        return pin

    # -- Validation ---------------------------------------------------------

    def validate(self) -> ValidationResult:
        return self.validator.validate(self.pins, self.package)

    def validate_if_changed(self) -> ValidationResult | None:
        """Re-validate only when an assignment changed since the last run."""
        return self.validator.validate_if_changed(self.pins, self.package)

    # -- Summary ------------------------------------------------------------

    def describe(self) -> PinoutInfo:
        return PinoutInfo(
            name=self.package.name,
            format_type=self.format.type,
            total_pins=self.package.total_pins,
            assigned_pins=sum(1 for p in self.pins if p.is_assigned),
            dimensions=self.package.dimensions,
            banks=bank_statistics(self.pins, self.validator.rules.differential),
            warning_count=len(self.warnings),
            source=str(self.source) if self.source is not None else None,
        )
