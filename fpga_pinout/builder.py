"""
Pin record builder for fpga-pinout.

Turns one ``RawRow`` (the string fields an extraction strategy pulled
out of a line) into a canonical ``Pin``, or raises ``RowRejectedError``.

Inference of direction and pin type is done with explicit, ordered rule
tables.  Vendor names often contain several keywords at once
(``IO_L1P_T0_VREF_34`` mentions both IO and VREF); the first matching
rule wins, so the order of the tables *is* the policy.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from fpga_pinout.config import ParseSettings
from fpga_pinout.exceptions import RowRejectedError
from fpga_pinout.grid import grid_to_position, parse_grid_position
from fpga_pinout.models import Pin, PinDirection, PinType

logger = logging.getLogger(__name__)

# Substrings that mark a pin-number cell as metadata ("Total Number of Pins", ...)
_PIN_NUMBER_DENYLIST = ("device", "package", "total", "number")

# Ordered: "in" is tested before "inout", so "InOut" text maps to Input.
DIRECTION_RULES: tuple[tuple[tuple[str, ...], PinDirection], ...] = (
    (("input", "in"), PinDirection.INPUT),
    (("output", "out"), PinDirection.OUTPUT),
    (("inout", "bidirectional", "bidir"), PinDirection.INOUT),
    (("power", "vcc"), PinDirection.POWER),
    (("ground", "gnd"), PinDirection.GROUND),
    (("clock", "clk"), PinDirection.CLOCK),
    (("reset", "rst"), PinDirection.RESET),
)


def _has_io_prefix(name: str) -> bool:
    # Prefix only: supply rails such as VCCIO_0 carry "io_" mid-name
    return name.startswith("io")


def _contains(*keywords: str) -> Callable[[str], bool]:
    return lambda name: any(k in name for k in keywords)


PIN_TYPE_RULES: tuple[tuple[Callable[[str], bool], PinType], ...] = (
    (_has_io_prefix, PinType.IO),
    (_contains("config", "tck", "tdi", "tdo", "tms", "done"), PinType.CONFIG),
    (_contains("vcc", "vdd"), PinType.POWER),
    (_contains("gnd", "vss"), PinType.GROUND),
    (_contains("mgt", "gt"), PinType.MGT),
    (_contains("clk", "clock"), PinType.CLOCK),
    (_contains("adc", "dac"), PinType.ADC),
    (_contains("vref", "special"), PinType.SPECIAL),
    (lambda name: "nc" in name or name == "", PinType.NC),
    (_contains("rsvd", "reserved"), PinType.RESERVED),
)


def infer_direction(text: str | None) -> PinDirection:
    """Map free-text direction to a PinDirection by ordered keyword containment."""
    if not text:
        return PinDirection.UNSPECIFIED
    value = text.strip().lower()
    for keywords, direction in DIRECTION_RULES:
        if any(k in value for k in keywords):
            return direction
    return PinDirection.UNSPECIFIED


def infer_pin_type(pin_name: str) -> PinType:
    """Infer the pin category from its functional name; IO when nothing matches."""
    name = pin_name.strip().lower()
    for predicate, pin_type in PIN_TYPE_RULES:
        if predicate(name):
            return pin_type
    return PinType.IO


@dataclass
class RawRow:
    """String fields extracted from one data line, before any defaulting."""
    pin_number: str = ""
    pin_name: str = ""
    signal_name: str = ""
    direction: str = ""
    voltage: str = ""
    bank: str = ""
    memory_byte_group: str = ""
    io_type: str = ""
    attributes: dict[str, str] = field(default_factory=dict)


def _new_id() -> str:
    return str(uuid.uuid4())


class PinBuilder:
    """Builds canonical Pins from RawRows.

    Args:
        settings: Parse settings (default voltage, tile spacing, pin
            number length limit).
        id_factory: Callable returning a fresh opaque id per Pin.
            Defaults to uuid4 strings.
    """

    def __init__(
        self,
        settings: ParseSettings | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.settings = settings or ParseSettings()
        self.id_factory = id_factory or _new_id

    def check_pin_number(self, pin_number: str) -> None:
        """Raise RowRejectedError for empty or metadata-looking pin numbers."""
        if not pin_number or pin_number.upper() == "NA":
            raise RowRejectedError(f"Invalid pin number '{pin_number}'")
        lowered = pin_number.lower()
        if any(word in lowered for word in _PIN_NUMBER_DENYLIST):
            raise RowRejectedError(f"Invalid pin number format '{pin_number}'")
        if len(pin_number) > self.settings.max_pin_number_length:
            raise RowRejectedError(f"Invalid pin number format '{pin_number}'")
        if not (pin_number.isascii() and pin_number.isalnum()):
            raise RowRejectedError(f"Invalid pin number format '{pin_number}'")

    def build(self, raw: RawRow) -> Pin:
        """Build a Pin from *raw*.

        Raises:
            RowRejectedError: If the pin number is missing, denylisted, or
                has no decodable grid position.
        """
        pin_number = raw.pin_number.strip()
        self.check_pin_number(pin_number)

        grid = parse_grid_position(pin_number)
        if grid is None:
            raise RowRejectedError(f"Could not parse grid position for pin '{pin_number}'")

        pin_name = raw.pin_name.strip() or pin_number
        attributes = {k: v.strip() for k, v in raw.attributes.items() if v and v.strip()}

        return Pin(
            id=self.id_factory(),
            pin_number=pin_number,
            pin_name=pin_name,
            signal_name=raw.signal_name.strip(),
            direction=infer_direction(raw.direction),
            pin_type=infer_pin_type(pin_name),
            voltage=raw.voltage.strip() or self.settings.default_voltage,
            package_pin=pin_number,
            grid_position=grid,
            position=grid_to_position(grid, self.settings.tile_spacing),
            bank=raw.bank.strip() or None,
            memory_byte_group=raw.memory_byte_group.strip() or None,
            io_type=raw.io_type.strip() or None,
            attributes=attributes,
        )
