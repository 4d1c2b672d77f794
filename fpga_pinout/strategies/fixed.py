"""
Positional extraction strategies.

``FixedStrategy`` reads report formats whose column order never changes
(the Quartus ``.pin`` report).  ``TransposedStrategy`` reads the
canonical lines produced by the spreadsheet pin-table transposer.
Both take their offsets from the dialect's ``positions`` table.
"""

from __future__ import annotations

from fpga_pinout.builder import RawRow
from fpga_pinout.exceptions import RowRejectedError
from fpga_pinout.strategies.base import BaseStrategy, field_at

_ATTRIBUTE_FIELDS = ("io_standard", "function")


class FixedStrategy(BaseStrategy):
    """Reads fields at fixed offsets; the header line is informational only.

    Power and ground rows are kept.  When the user-assignment column is
    ``Y`` the usage name is the user's signal, so it is bound as the
    pin's signal name.
    """

    positions: dict[str, int]

    def prepare(self, header: list[str] | None) -> None:
        self.positions = dict(self.dialect.positions)

    def get(self, fields: list[str], name: str) -> str:
        return field_at(fields, self.positions.get(name))

    def read_row(self, fields: list[str]) -> RawRow:
        pin_name = self.get(fields, "pin_name")
        signal_name = self.get(fields, "signal_name")
        if not signal_name and self.get(fields, "user_assignment").upper() == "Y":
            signal_name = pin_name
        return RawRow(
            pin_number=self.get(fields, "pin_number"),
            pin_name=pin_name,
            signal_name=signal_name,
            direction=self.get(fields, "direction"),
            voltage=self.get(fields, "voltage"),
            bank=self.get(fields, "bank"),
            memory_byte_group=self.get(fields, "memory_byte_group"),
            io_type=self.get(fields, "io_type"),
            attributes={name: self.get(fields, name) for name in _ATTRIBUTE_FIELDS},
        )


class TransposedStrategy(FixedStrategy):
    """Reads canonical transposed spreadsheet rows.

    The Row/Col cells were split from the pin number by the transposer;
    a row whose Row+Col no longer spells its pin number is corrupt.
    """

    def read_row(self, fields: list[str]) -> RawRow:
        raw = super().read_row(fields)
        row, col = self.get(fields, "row"), self.get(fields, "col")
        if row and col and f"{row}{col}".upper() != raw.pin_number.strip().upper():
            raise RowRejectedError(
                f"Row/Col '{row}{col}' does not match pin '{raw.pin_number}'"
            )
        return raw
