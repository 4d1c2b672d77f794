"""
Format detection for FPGA pin description files.

Uses the dialect YAML files for detection instead of hard-coded vendor
checks.  Each dialect declares header keywords with a minimum match
count, and optionally a bounded fast-path signature.

Design: Strategy Pattern
- detect_format() returns a Detection naming the matched dialect and
  where its header line sits.
- The extraction strategy is chosen from the dialect's ``strategy`` tag.
- New vendor layouts are added by creating a dialect YAML file.

Detection algorithm (first hit wins):
1. Fast path 1: a line starting with a dialect's ``line_prefix``
   signature, within the first ``fast_path_scan_lines`` lines.
2. Fast path 2: a dialect's column ``phrase`` within the first
   ``phrase_scan_lines`` lines.
3. Header search: the first line (within ``header_scan_lines``) with at
   least 3 columns and a column literally "Pin" or "Ball".  It is
   classified; with no keyword match it is still a generic header.
4. The first line is classified; with no match the input is
   generic-without-header and every line is data.

Lines are filtered for noise (blank lines, comments, license banners,
``Device/Package`` preambles) before any of this runs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from fpga_pinout.config import ParseSettings
from fpga_pinout.dialect_registry import Dialect, bundled_dialects
from fpga_pinout.exceptions import UnknownFormatError
from fpga_pinout.tokenizer import is_blank_row, sniff_delimiter, split_line

logger = logging.getLogger(__name__)

_COMMENT_PREFIXES = ("#", "//", "--")
_NOISE_WORDS = ("copyright", "license")
_PREAMBLE_PREFIX = "device/package"
_HEADER_ANCHORS = ("pin", "ball")
_MIN_HEADER_COLUMNS = 3

# Whitespace around commas is not significant for prefix signatures
_COMMA_SPACING = re.compile(r"\s*,\s*")


@dataclass
class Detection:
    """Outcome of format detection.

    Attributes:
        dialect: The dialect whose strategy reads the data rows.
        header_index: Index of the header line in the filtered line list,
            or ``None`` when every line is data.
        has_header: Whether a header line was located.
        delimiter: Delimiter to tokenize with.
        method: Which detection step matched (for logging and tests).
    """
    dialect: Dialect
    header_index: int | None
    has_header: bool
    delimiter: str
    method: str


def is_noise(line: str) -> bool:
    """True for lines that can never carry pin data."""
    stripped = line.strip()
    if not stripped or is_blank_row(stripped, sniff_delimiter(stripped)):
        return True
    if stripped.startswith(_COMMENT_PREFIXES):
        return True
    lowered = stripped.lower()
    if any(word in lowered for word in _NOISE_WORDS):
        return True
    return lowered.startswith(_PREAMBLE_PREFIX)


def filter_noise(lines: Iterable[str]) -> list[tuple[int, str]]:
    """Drop noise lines, keeping 1-based original line numbers."""
    return [
        (line_no, line.rstrip("\r\n"))
        for line_no, line in enumerate(lines, start=1)
        if not is_noise(line)
    ]


def count_keyword_matches(tokens: list[str], keywords: list[str]) -> int:
    """Count keywords appearing (case-insensitively) inside any token."""
    lowered = [t.lower() for t in tokens]
    return sum(
        1 for keyword in keywords
        if any(keyword.lower() in token for token in lowered)
    )


def _fallback_dialect(dialects: list[Dialect]) -> Dialect:
    for dialect in dialects:
        if dialect.fallback:
            return dialect
    raise UnknownFormatError(
        f"No fallback dialect registered. Available: {[d.name for d in dialects]}"
    )


def classify_header(line: str, dialects: list[Dialect]) -> Detection:
    """Classify one candidate header line.

    Dialects with ``classify: true`` are tried in priority order; the
    first whose keyword match count reaches its ``min_matches`` wins.
    Without a match the result is the fallback dialect with no header.
    """
    delimiter = sniff_delimiter(line)
    tokens = split_line(line, delimiter)
    for dialect in dialects:
        if not dialect.classify:
            continue
        matches = count_keyword_matches(tokens, dialect.keywords)
        if matches >= dialect.min_matches:
            logger.debug("Header matched '%s' (%d keywords)", dialect.name, matches)
            return Detection(dialect, 0, True, delimiter, "classify")
    return Detection(_fallback_dialect(dialects), None, False, delimiter, "classify")


def _check_line_prefix(
    lines: list[tuple[int, str]], dialects: list[Dialect], limit: int,
) -> Detection | None:
    candidates = [d for d in dialects if d.fast_path and d.fast_path.kind == "line_prefix"]
    if not candidates:
        return None
    for index, (_line_no, line) in enumerate(lines[:limit]):
        normalized = _COMMA_SPACING.sub(",", line.strip().lower())
        for dialect in candidates:
            if normalized.startswith(dialect.fast_path.text):
                return Detection(dialect, index, True, dialect.delimiter, "line_prefix")
    return None


def _check_phrase(
    lines: list[tuple[int, str]], dialects: list[Dialect], limit: int,
) -> Detection | None:
    candidates = [d for d in dialects if d.fast_path and d.fast_path.kind == "phrase"]
    if not candidates:
        return None
    for index, (_line_no, line) in enumerate(lines[:limit]):
        lowered = line.lower()
        for dialect in candidates:
            if dialect.fast_path.text in lowered:
                return Detection(dialect, index, True, dialect.delimiter, "phrase")
    return None


def find_header_line(lines: list[tuple[int, str]], limit: int) -> int | None:
    """Index of the first line with >= 3 columns and a "Pin"/"Ball" column."""
    for index, (_line_no, line) in enumerate(lines[:limit]):
        tokens = split_line(line, sniff_delimiter(line))
        if len(tokens) < _MIN_HEADER_COLUMNS:
            continue
        if any(t.lower() in _HEADER_ANCHORS for t in tokens):
            return index
    return None


def detect_format(
    lines: list[tuple[int, str]],
    dialects: list[Dialect] | None = None,
    settings: ParseSettings | None = None,
) -> Detection:
    """Detect the dialect of noise-filtered, numbered lines.

    Args:
        lines: ``(line_no, text)`` pairs, as returned by ``filter_noise``.
        dialects: Pre-loaded dialects (optional; loads from disk if None).
        settings: Scan limits (optional; defaults if None).

    Returns:
        A Detection. Never fails for content reasons: unrecognized input
        is generic-without-header.

    Raises:
        UnknownFormatError: If no dialects are available.
    """
    if dialects is None:
        dialects = bundled_dialects()
    if not dialects:
        raise UnknownFormatError("No dialect YAML files found. Cannot detect format.")
    settings = settings or ParseSettings()

    detection = _check_line_prefix(lines, dialects, settings.fast_path_scan_lines)
    if detection is None:
        detection = _check_phrase(lines, dialects, settings.phrase_scan_lines)

    if detection is None:
        header_index = find_header_line(lines, settings.header_scan_lines)
        if header_index is not None:
            classified = classify_header(lines[header_index][1], dialects)
            detection = Detection(
                classified.dialect, header_index, True, classified.delimiter, "header_search",
            )

    if detection is None:
        if lines:
            detection = classify_header(lines[0][1], dialects)
        else:
            fallback = _fallback_dialect(dialects)
            detection = Detection(fallback, None, False, fallback.delimiter, "classify")

    logger.info(
        "Detected dialect '%s' via %s (header: %s)",
        detection.dialect.name, detection.method,
        "none" if detection.header_index is None else f"line {lines[detection.header_index][0]}",
    )
    return detection
