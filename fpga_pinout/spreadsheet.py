"""
Spreadsheet preprocessing for fpga-pinout.

Binary workbooks (``.xlsx`` / ``.xls``) are reduced to delimited text
before format detection, so the rest of the import never sees a
spreadsheet.  Only the first sheet is read.

Vendor device pin-out workbooks (Intel/Altera) lay the pin table out
with one column per package, e.g.::

    Bank Number | VREF     | Pin Name/Function | Optional Function(s) | Configuration Function | F484
    3A          | VREFB3AN0| IO                | DIFFIO_RX_L1n        |                        | AB3

Those are detected and transposed into canonical rows
(``Pin, Pin Name, Signal, Direction, Voltage, Package_Pin, Row, Col,
Bank, Type``) read by the ``sheet`` dialect.  Any other sheet is
converted to CSV text unmodified.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass

import pandas as pd

from fpga_pinout.config import ParseSettings
from fpga_pinout.exceptions import SpreadsheetError

logger = logging.getLogger(__name__)

_XLSX_MAGIC = b"PK\x03\x04"
_XLS_MAGIC = b"\xd0\xcf\x11\xe0"

CANONICAL_COLUMNS = (
    "Pin",
    "Pin Name",
    "Signal",
    "Direction",
    "Voltage",
    "Package_Pin",
    "Row",
    "Col",
    "Bank",
    "Type",
)

# Package-code headers such as F484 or U169
_PACKAGE_CODE = re.compile(r"^[a-z]{1,2}\d{2,4}$")
_PIN_SPLIT = re.compile(r"^([A-Za-z]+)(\d+)$")
_NO_CONNECT = ("nc", "no connect")
_DEFAULT_BANK = "NA"


@dataclass
class SheetText:
    """Text rendering of a workbook's first sheet.

    Attributes:
        text: Delimited text for the line-oriented importer.
        transposed: True when a vendor pin table was transposed into
            canonical rows (read with the ``sheet`` dialect).
    """
    text: str
    transposed: bool = False


@dataclass
class PinTableColumns:
    pin: int
    name: int
    bank: int
    function: int | None = None


def is_spreadsheet(data: bytes) -> bool:
    """True for xlsx (ZIP) or xls (OLE2) containers."""
    return data.startswith(_XLSX_MAGIC) or data.startswith(_XLS_MAGIC)


def read_first_sheet(data: bytes) -> pd.DataFrame:
    """Read the first sheet as an all-string grid (no header inference).

    Raises:
        SpreadsheetError: If the workbook cannot be read.
    """
    engine = "openpyxl" if data.startswith(_XLSX_MAGIC) else "xlrd"
    try:
        grid = pd.read_excel(
            io.BytesIO(data), sheet_name=0, header=None, dtype=str, engine=engine,
        )
    except Exception as exc:
        raise SpreadsheetError(f"Could not read workbook ({engine}): {exc}") from exc
    return grid.fillna("")


def _row_cells(grid: pd.DataFrame, row: int) -> list[str]:
    return [str(v).strip() for v in grid.iloc[row].tolist()]


def find_pin_table_header(grid: pd.DataFrame, scan_rows: int = 10) -> int | None:
    """Index of the vendor pin-table header row, or None.

    The header must hold a "Pin Name/Function" cell, a bank cell, and a
    VREF or "Configuration Function" cell.
    """
    for row in range(min(scan_rows, len(grid))):
        cells = [c.lower() for c in _row_cells(grid, row)]
        has_name = any("pin name/function" in c for c in cells)
        has_bank = any("bank" in c for c in cells)
        has_ref = any("vref" in c or "configuration function" in c for c in cells)
        if has_name and has_bank and has_ref:
            return row
    return None


def locate_columns(header: list[str]) -> PinTableColumns | None:
    """Find the pin-number, pin-name, bank and function columns."""
    lowered = [h.lower() for h in header]

    name = next((i for i, h in enumerate(lowered) if "pin name/function" in h), None)
    bank = next((i for i, h in enumerate(lowered) if "bank" in h), None)
    pin = next((i for i, h in enumerate(lowered) if _PACKAGE_CODE.match(h)), None)
    if pin is None:
        pin = next(
            (i for i, h in enumerate(lowered)
             if ("pin" in h or "ball" in h) and "name" not in h),
            None,
        )
    function = next((i for i, h in enumerate(lowered) if "configuration function" in h), None)

    if name is None or bank is None or pin is None:
        return None
    return PinTableColumns(pin=pin, name=name, bank=bank, function=function)


def _quote(value: str) -> str:
    value = value.replace('"', "")
    return f'"{value}"' if "," in value else value


def transpose_pin_table(grid: pd.DataFrame, header_row: int) -> str | None:
    """Emit canonical 10-field lines for every data row below *header_row*.

    Returns None when the pin-number, name or bank column cannot be
    located.
    """
    columns = locate_columns(_row_cells(grid, header_row))
    if columns is None:
        logger.warning("Pin table header found at row %d but columns not located", header_row)
        return None
    logger.debug("Pin table columns: %s", columns)

    lines = [",".join(CANONICAL_COLUMNS)]
    skipped = 0
    for row in range(header_row + 1, len(grid)):
        cells = _row_cells(grid, row)
        name = cells[columns.name]
        if name.lower() in _NO_CONNECT:
            skipped += 1
            continue
        pin = cells[columns.pin]
        bank = cells[columns.bank] or _DEFAULT_BANK
        function = cells[columns.function] if columns.function is not None else ""
        match = _PIN_SPLIT.match(pin)
        grid_row, grid_col = (match.group(1), match.group(2)) if match else ("", "")
        fields = [pin, name, "", "", "", pin, grid_row, grid_col, bank, function]
        lines.append(",".join(_quote(f) for f in fields))

    logger.info(
        "Transposed pin table: %d rows, %d no-connect rows skipped", len(lines) - 1, skipped,
    )
    return "\n".join(lines)


def sheet_to_text(data: bytes, settings: ParseSettings | None = None) -> SheetText:
    """Convert a workbook's first sheet to text for the importer.

    Raises:
        SpreadsheetError: If the workbook cannot be read.
    """
    settings = settings or ParseSettings()
    grid = read_first_sheet(data)
    if grid.empty:
        raise SpreadsheetError("First sheet of workbook is empty")

    header_row = find_pin_table_header(grid, settings.sheet_scan_rows)
    if header_row is not None:
        text = transpose_pin_table(grid, header_row)
        if text is not None:
            return SheetText(text=text, transposed=True)

    logger.info("Converting sheet (%d x %d) to CSV text", *grid.shape)
    return SheetText(text=grid.to_csv(index=False, header=False), transposed=False)
