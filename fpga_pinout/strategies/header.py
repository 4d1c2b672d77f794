"""
Header-driven extraction strategy.

Used by dialects whose column order varies between tool versions
(Xilinx package files, generic pin lists).  Column semantics come from a
best-effort search of each logical field's aliases against the header
tokens; without a header the dialect's positional offsets apply.
"""

from __future__ import annotations

import logging

from fpga_pinout.builder import RawRow
from fpga_pinout.strategies.base import BaseStrategy, field_at

logger = logging.getLogger(__name__)

_ATTRIBUTE_FIELDS = ("io_standard",)


def resolve_columns(header: list[str], aliases: dict[str, list[str]]) -> dict[str, int]:
    """Map logical fields to header column indices.

    Fields are resolved in the order given.  For each field, an exact
    (case-insensitive) match on any alias wins; otherwise the first
    header containing an alias as a substring.  A column is claimed by at
    most one field, so ``Signal_Name`` taken by ``signal_name`` is not
    reused for ``pin_name``'s ``name`` alias.
    """
    headers = [h.strip().lower() for h in header]
    claimed: set[int] = set()
    mapping: dict[str, int] = {}

    for field_name, terms in aliases.items():
        lowered = [t.lower() for t in terms]
        index = _find_exact(headers, lowered, claimed)
        if index is None:
            index = _find_substring(headers, lowered, claimed)
        if index is not None:
            mapping[field_name] = index
            claimed.add(index)
    return mapping


def _find_exact(headers: list[str], terms: list[str], claimed: set[int]) -> int | None:
    for term in terms:
        for i, h in enumerate(headers):
            if i not in claimed and h == term:
                return i
    return None


def _find_substring(headers: list[str], terms: list[str], claimed: set[int]) -> int | None:
    for term in terms:
        for i, h in enumerate(headers):
            if i not in claimed and term in h:
                return i
    return None


class HeaderStrategy(BaseStrategy):
    """Reads rows through a header-resolved column mapping."""

    mapping: dict[str, int]

    def prepare(self, header: list[str] | None) -> None:
        if header:
            self.mapping = resolve_columns(header, self.dialect.columns)
        else:
            self.mapping = dict(self.dialect.positions)
        logger.debug("%s column mapping: %s", self.dialect.name, self.mapping)
        if "pin_number" not in self.mapping:
            logger.warning("%s: no pin column found in header %s", self.dialect.name, header)

    def read_row(self, fields: list[str]) -> RawRow:
        get = lambda name: field_at(fields, self.mapping.get(name))  # noqa: E731
        return RawRow(
            pin_number=get("pin_number"),
            pin_name=get("pin_name"),
            signal_name=get("signal_name"),
            direction=get("direction"),
            voltage=get("voltage"),
            bank=get("bank"),
            memory_byte_group=get("memory_byte_group"),
            io_type=get("io_type"),
            attributes={name: get(name) for name in _ATTRIBUTE_FIELDS},
        )
