"""
Package aggregation and per-bank statistics.

``create_package`` derives the package extents from the imported pins.
``bank_statistics`` summarizes utilization per bank with pandas, for the
``Pinout.describe()`` report.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pandas as pd

from fpga_pinout.models import Package, Pin
from fpga_pinout.validation.diffpair import POSITIVE, polarity
from fpga_pinout.validation.rules import DifferentialRules, default_rule_table

logger = logging.getLogger(__name__)

UNASSIGNED_BANK = "UNASSIGNED"
_UNKNOWN = "Unknown"


def create_package(
    pins: Sequence[Pin],
    name: str = _UNKNOWN,
    id_factory: Callable[[], str] | None = None,
) -> Package:
    """Build a Package from imported pins.

    ``device`` and ``package_type`` are the first two ``-``-separated
    parts of *name* (``"xc7a35t-cpg236"``).  Dimensions are the highest
    row index + 1 and the highest column; an empty pin set is 0 x 0.
    """
    new_id = id_factory or (lambda: str(uuid.uuid4()))
    parts = name.split("-")
    device = parts[0] or _UNKNOWN
    package_type = parts[1] if len(parts) > 1 and parts[1] else _UNKNOWN

    if not pins:
        return Package(
            id=new_id(), name=name, device=_UNKNOWN, package_type=_UNKNOWN,
            rows=0, cols=0, pins=[],
        )

    rows = max(p.grid_position.row_index for p in pins) + 1
    cols = max(p.grid_position.col for p in pins)
    logger.debug("Package '%s': %d x %d, %d pins", name, rows, cols, len(pins))
    return Package(
        id=new_id(),
        name=name,
        device=device,
        package_type=package_type,
        rows=rows,
        cols=cols,
        pins=list(pins),
    )


@dataclass
class BankStatistics:
    """Utilization of one bank."""
    bank_id: str
    total_pins: int
    assigned_pins: int
    unassigned_pins: int
    utilization_rate: float
    pins_by_type: dict[str, int] = field(default_factory=dict)
    pins_by_voltage: dict[str, int] = field(default_factory=dict)
    pins_by_direction: dict[str, int] = field(default_factory=dict)
    differential_pairs: int = 0


@dataclass
class BankSummary:
    """Utilization across all banks.

    Pins without a bank are grouped under ``"UNASSIGNED"``, which is
    listed last and never counted as the most or least utilized bank.
    """
    total_banks: int
    total_pins: int
    overall_utilization: float
    banks: list[BankStatistics] = field(default_factory=list)
    most_utilized_bank: str = "N/A"
    least_utilized_bank: str = "N/A"


def pins_to_frame(pins: Sequence[Pin], rules: DifferentialRules | None = None) -> pd.DataFrame:
    """One row per pin with the columns the statistics group on."""
    if rules is None:
        rules = default_rule_table().differential
    records = [
        {
            "id": p.id,
            "pin_number": p.pin_number,
            "pin_name": p.pin_name,
            "signal_name": p.signal_name,
            "bank": p.bank or UNASSIGNED_BANK,
            "pin_type": p.pin_type.value,
            "voltage": p.voltage or "UNSPECIFIED",
            "direction": p.direction.value,
            "assigned": p.is_assigned,
            "positive_half": polarity(p.pin_name, rules) == POSITIVE,
        }
        for p in pins
    ]
    return pd.DataFrame.from_records(
        records,
        columns=[
            "id", "pin_number", "pin_name", "signal_name", "bank", "pin_type",
            "voltage", "direction", "assigned", "positive_half",
        ],
    )


def _bank_sort_key(bank_id: str) -> tuple[int, int, str]:
    if bank_id == UNASSIGNED_BANK:
        return (2, 0, "")
    if bank_id.isdigit():
        return (0, int(bank_id), "")
    return (1, 0, bank_id)


def _counts(series: pd.Series) -> dict[str, int]:
    return {str(k): int(v) for k, v in series.value_counts().items()}


def bank_statistics(
    pins: Sequence[Pin],
    rules: DifferentialRules | None = None,
) -> BankSummary:
    """Per-bank utilization, pin-type, voltage and direction counts."""
    df = pins_to_frame(pins, rules)
    if df.empty:
        return BankSummary(total_banks=0, total_pins=0, overall_utilization=0.0)

    banks: list[BankStatistics] = []
    for bank_id, group in df.groupby("bank", sort=False):
        total = len(group)
        assigned = int(group["assigned"].sum())
        banks.append(BankStatistics(
            bank_id=str(bank_id),
            total_pins=total,
            assigned_pins=assigned,
            unassigned_pins=total - assigned,
            utilization_rate=assigned / total * 100,
            pins_by_type=_counts(group["pin_type"]),
            pins_by_voltage=_counts(group["voltage"]),
            pins_by_direction=_counts(group["direction"]),
            differential_pairs=int(group["positive_half"].sum()),
        ))
    banks.sort(key=lambda b: _bank_sort_key(b.bank_id))

    ranked = [b for b in banks if b.bank_id != UNASSIGNED_BANK]
    most = max(ranked, key=lambda b: b.utilization_rate).bank_id if ranked else "N/A"
    least = min(ranked, key=lambda b: b.utilization_rate).bank_id if ranked else "N/A"

    return BankSummary(
        total_banks=len(banks),
        total_pins=len(df),
        overall_utilization=float(df["assigned"].sum()) / len(df) * 100,
        banks=banks,
        most_utilized_bank=most,
        least_utilized_bank=least,
    )
