"""
Internal import pipeline for fpga-pinout.

Extracted from ``__init__.py`` so that both the module-level
``import_pins()`` / ``open()`` functions and ``Pinout.from_bytes()``
reuse the same bytes -> text -> detect -> extract sequence without
circular imports.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fpga_pinout.builder import PinBuilder
from fpga_pinout.config import PinoutConfig
from fpga_pinout.detect import Detection, detect_format, filter_noise
from fpga_pinout.dialect_registry import Dialect, bundled_dialects, get_dialect
from fpga_pinout.exceptions import SpreadsheetError
from fpga_pinout.models import ImportResult, PinoutFormat
from fpga_pinout.spreadsheet import is_spreadsheet, sheet_to_text
from fpga_pinout.strategies import get_strategy
from fpga_pinout.tokenizer import split_line

logger = logging.getLogger(__name__)

# Dialect that reads transposed spreadsheet pin tables
SHEET_DIALECT = "sheet"


def decode_text(data: bytes) -> str:
    """Decode as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("Input is not valid UTF-8; decoding as Latin-1")
        return data.decode("latin-1")


def _failure(message: str, fmt: PinoutFormat | None = None) -> ImportResult:
    logger.error("Import failed: %s", message)
    return ImportResult(
        success=False, pins=[], warnings=[], errors=[message], format=fmt or PinoutFormat(),
    )


def _format_of(detection: Detection) -> PinoutFormat:
    dialect = detection.dialect
    return PinoutFormat(
        type=dialect.format_type,
        has_header=detection.has_header,
        delimiter=detection.delimiter,
        comment_prefix=dialect.comment_prefix,
        expected_columns=dialect.expected_columns,
    )


def run_import(
    data: bytes | str,
    name: str = "Unknown",
    config: PinoutConfig | None = None,
    dialects: list[Dialect] | None = None,
    id_factory: Callable[[], str] | None = None,
) -> ImportResult:
    """Import pins from raw bytes or text.

    Orchestration:
      1. Binary workbooks are converted to text (``spreadsheet``).
      2. Noise lines are filtered, keeping original line numbers.
      3. ``detect_format()`` picks the dialect and header line (skipped
         for transposed spreadsheet tables, which use the ``sheet``
         dialect).
      4. The dialect's strategy builds pins from the data lines.

    Content problems never raise: they produce ``success=False`` with
    the reason in ``errors``.

    Raises:
        UnknownFormatError: If no dialect definitions are available.
    """
    config = config or PinoutConfig()
    settings = config.parsing
    if not data:
        return _failure(f"Input '{name}' is empty")
    if dialects is None:
        dialects = bundled_dialects()

    forced: Dialect | None = None
    if isinstance(data, bytes) and is_spreadsheet(data):
        try:
            sheet = sheet_to_text(data, settings)
        except SpreadsheetError as exc:
            return _failure(f"Could not read spreadsheet '{name}': {exc}")
        text = sheet.text
        if sheet.transposed:
            forced = get_dialect(SHEET_DIALECT, dialects)
    elif isinstance(data, bytes):
        text = decode_text(data)
    else:
        text = data

    lines = filter_noise(text.splitlines())
    if not lines:
        return _failure(f"No data lines found in '{name}'")

    if forced is not None:
        detection = Detection(forced, 0, True, forced.delimiter, "spreadsheet")
    else:
        detection = detect_format(lines, dialects, settings)

    header: list[str] | None = None
    data_lines = lines
    if detection.header_index is not None:
        header = split_line(lines[detection.header_index][1], detection.delimiter)
        data_lines = lines[detection.header_index + 1:]

    builder = PinBuilder(settings, id_factory)
    strategy = get_strategy(detection.dialect, builder, detection.delimiter)
    extraction = strategy.extract(data_lines, header)
    fmt = _format_of(detection)

    if not extraction.pins:
        result = _failure(
            f"No valid pins found in '{name}' ({detection.dialect.name} format, "
            f"{extraction.rows_seen} rows examined)",
            fmt,
        )
        result.warnings = extraction.warnings
        return result

    logger.info(
        "Imported %d pins from '%s' (%s, %d warnings)",
        len(extraction.pins), name, detection.dialect.name, len(extraction.warnings),
    )
    return ImportResult(
        success=True,
        pins=extraction.pins,
        warnings=extraction.warnings,
        errors=[],
        format=fmt,
    )
