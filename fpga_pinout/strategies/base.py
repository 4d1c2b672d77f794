"""
Base extraction strategy for fpga-pinout.

All dialect-specific strategies implement this interface.  The contract is:
1. ``prepare(header)`` resolves column semantics once per import.
2. ``read_row(fields)`` turns one tokenized line into a ``RawRow``.
3. ``extract(lines, header)`` (shared) runs the per-line loop, hands each
   RawRow to the PinBuilder and collects soft warnings for rejected rows.

A rejected row never aborts the import: license banners, "Total Number
of Pins" footers and similar noise in vendor exports are dropped with a
warning.  Whether zero pins is a failure is decided by the caller.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from fpga_pinout.builder import PinBuilder, RawRow
from fpga_pinout.dialect_registry import Dialect
from fpga_pinout.exceptions import RowRejectedError
from fpga_pinout.models import Pin
from fpga_pinout.tokenizer import is_blank_row, split_line

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Standardized output from any strategy.

    Attributes:
        pins: Pins built from accepted rows, in input order.
        warnings: One ``"Line N: reason"`` entry per rejected row.
        rows_seen: Non-blank data lines examined.
    """
    pins: list[Pin] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    rows_seen: int = 0


def field_at(fields: list[str], index: int | None) -> str:
    """The field at *index*, or ``""`` when unmapped or out of range."""
    if index is None or index < 0 or index >= len(fields):
        return ""
    return fields[index]


class BaseStrategy(ABC):
    """Abstract base class for extraction strategies.

    Args:
        dialect: The dialect whose column semantics this strategy applies.
        builder: Pin builder shared by all strategies of one import.
        delimiter: Overrides the dialect's delimiter (e.g. a sniffed tab).
    """

    def __init__(
        self,
        dialect: Dialect,
        builder: PinBuilder,
        delimiter: str | None = None,
    ) -> None:
        self.dialect = dialect
        self.builder = builder
        self.delimiter = delimiter or dialect.delimiter

    @abstractmethod
    def prepare(self, header: list[str] | None) -> None:
        """Resolve column semantics from the (optional) tokenized header."""

    @abstractmethod
    def read_row(self, fields: list[str]) -> RawRow:
        """Map one tokenized data line to a RawRow.

        Raises:
            RowRejectedError: If the row is structurally unusable.
        """

    def extract(
        self,
        lines: Iterable[tuple[int, str]],
        header: list[str] | None = None,
    ) -> ExtractionResult:
        """Build pins from numbered data lines (header already consumed)."""
        self.prepare(header)
        result = ExtractionResult()

        for line_no, line in lines:
            if is_blank_row(line, self.delimiter):
                continue
            result.rows_seen += 1
            try:
                raw = self.read_row(split_line(line, self.delimiter))
                pin = self.builder.build(raw)
            except (RowRejectedError, ValueError, IndexError) as exc:
                message = f"Line {line_no}: {exc}"
                logger.debug(message)
                result.warnings.append(message)
                continue
            result.pins.append(pin)

        if result.warnings:
            logger.warning(
                "%s: skipped %d of %d rows",
                self.dialect.name, len(result.warnings), result.rows_seen,
            )
        logger.info("%s: built %d pins", self.dialect.name, len(result.pins))
        return result
