"""
Grid addressing for FPGA package pins.

A package pin such as ``AB12`` is a (row label, column) address on the
ball matrix.  Row labels run A..Z and then continue spreadsheet-style
(AA, AB, ..., AZ, BA, ..., ZZ, AAA, ...) because large BGA packages
have more than 26 rows.  Labels are only ever compared through their
integer index: lexically "AA" < "B", which is wrong for a package.

Index law: A=0, ..., Z=25, AA=26, AB=27, ..., AZ=51, BA=52, ..., ZZ=701.
Two-letter labels therefore map to ``26 + 26*first + second``.  The same
bijective base-26 scheme continues past two letters, so
``row_to_index(index_to_row(n)) == n`` for every ``n >= 0``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from fpga_pinout.models import GridPosition, Pin, Position

_PIN_NUMBER_PATTERN = re.compile(r"^([A-Za-z]+)(\d+)$")
_ALPHABET = 26


def row_to_index(label: str) -> int:
    """Convert a row label to its zero-based index.

    Malformed labels (empty, or containing anything but ASCII letters)
    fall back to index 0 instead of raising.
    """
    if not label or not label.isascii() or not label.isalpha():
        return 0
    value = 0
    for char in label.upper():
        value = value * _ALPHABET + (ord(char) - ord("A") + 1)
    return value - 1


def index_to_row(index: int) -> str:
    """Convert a zero-based row index to its label.

    Negative indices fall back to ``"A"``.
    """
    if index < 0:
        return "A"
    letters: list[str] = []
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, _ALPHABET)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def compare_rows(row_a: str, row_b: str) -> int:
    """Three-way compare two row labels by index (negative, zero, positive)."""
    return row_to_index(row_a) - row_to_index(row_b)


def parse_grid_position(pin_number: str) -> GridPosition | None:
    """Decode a pin number like ``"AB12"`` into a GridPosition.

    Returns ``None`` when the pin number is not letters followed by
    digits, or when the column is 0.  No fallback position is invented.
    """
    match = _PIN_NUMBER_PATTERN.match(pin_number.strip())
    if match is None:
        return None
    col = int(match.group(2))
    if col < 1:
        return None
    return GridPosition(row=match.group(1).upper(), col=col)


def grid_to_position(grid: GridPosition, tile_spacing: int = 88) -> Position:
    """Pixel position of a grid address; A1 sits at the origin."""
    return Position(
        x=(grid.col - 1) * tile_spacing,
        y=row_to_index(grid.row) * tile_spacing,
    )


def sort_pins_by_grid(pins: Iterable[Pin]) -> list[Pin]:
    """Return pins ordered row-first (by index), then by column."""
    return sorted(
        pins,
        key=lambda p: (row_to_index(p.grid_position.row), p.grid_position.col),
    )
