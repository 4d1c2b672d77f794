"""
fpga-pinout: import FPGA package pin lists and validate pin assignments.

Public API surface:

- ``open(path, config=None)`` -- **recommended entry point**. Reads a pin
  file (CSV / text report / spreadsheet) and returns a ``Pinout`` handle.

- ``import_pins(data, name, config)`` -- Parse raw bytes or text into
  canonical ``Pin`` records.  Returns an ``ImportResult``; never raises
  for problems in the content.

- ``create_package(pins, name)`` -- Aggregate pins into a ``Package``.

- ``validate_pins(pins, package)`` -- One-shot constraint validation.
  Use ``Validator`` for listeners and change detection.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fpga_pinout._pipeline import run_import
from fpga_pinout.config import PinoutConfig, load_config
from fpga_pinout.models import (
    ImportResult,
    IssueType,
    Package,
    Pin,
    PinDirection,
    PinType,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from fpga_pinout.package import create_package
from fpga_pinout.pinout import Pinout, PinoutInfo
from fpga_pinout.validation import Validator, validate_pins

__all__ = [
    "open",
    "import_pins",
    "create_package",
    "validate_pins",
    "Pinout",
    "PinoutInfo",
    "Validator",
    "ImportResult",
    "IssueType",
    "Package",
    "Pin",
    "PinDirection",
    "PinType",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]

logger = logging.getLogger(__name__)


def import_pins(
    data: bytes | str,
    name: str = "Unknown",
    config: PinoutConfig | None = None,
) -> ImportResult:
    """Parse a pin description file into canonical pins.

    Args:
        data: Raw file bytes (delimited text or a spreadsheet container)
            or already-decoded text.
        name: Display name used in messages and for the package.
        config: Optional configuration (scan limits, defaults).

    Returns:
        An ``ImportResult``; ``success`` is True iff at least one pin
        was decoded.

    Examples::

        result = fpga_pinout.import_pins(Path("xc7a35tcpg236pkg.csv").read_bytes())
        if result.success:
            print(len(result.pins), result.format.type)
    """
    return run_import(data, name=name, config=config)


def open(
    path: str | Path,
    config: PinoutConfig | str | Path | None = None,
) -> Pinout:
    """Single entry point: import a pin file from disk.

    Args:
        path: Pin file to read.  Its stem becomes the package name
            (``xc7a35t-cpg236.csv`` -> device ``xc7a35t``, package
            ``cpg236``).
        config: A ``PinoutConfig`` or a path to ``pinout.yaml``.

    Returns:
        A ``Pinout`` handle.

    Raises:
        FileNotFoundError: If *path* (or the config path) does not exist.
        ImportFailedError: If no pins could be imported.

    Examples::

        pinout = fpga_pinout.open("xc7a35t-cpg236.csv")
        pinout.assign_signal(pinout.find_pin("E3").id, "CLK100MHZ")
        result = pinout.validate()
    """
    p = Path(path)
    if config is not None and not isinstance(config, PinoutConfig):
        config = load_config(config)
    logger.info("open() -- reading %s", p)
    return Pinout.from_bytes(p.read_bytes(), name=p.stem, config=config, source=p)
