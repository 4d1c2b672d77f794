"""Extraction strategies, selected by a dialect's ``strategy`` tag."""

from __future__ import annotations

from fpga_pinout.builder import PinBuilder
from fpga_pinout.dialect_registry import Dialect
from fpga_pinout.strategies.base import BaseStrategy, ExtractionResult
from fpga_pinout.strategies.fixed import FixedStrategy, TransposedStrategy
from fpga_pinout.strategies.header import HeaderStrategy, resolve_columns

STRATEGIES: dict[str, type[BaseStrategy]] = {
    "header": HeaderStrategy,
    "fixed": FixedStrategy,
    "transposed": TransposedStrategy,
}


def get_strategy(
    dialect: Dialect,
    builder: PinBuilder,
    delimiter: str | None = None,
) -> BaseStrategy:
    """Instantiate the strategy named by ``dialect.strategy``."""
    return STRATEGIES[dialect.strategy](dialect, builder, delimiter)


__all__ = [
    "BaseStrategy",
    "ExtractionResult",
    "FixedStrategy",
    "HeaderStrategy",
    "STRATEGIES",
    "TransposedStrategy",
    "get_strategy",
    "resolve_columns",
]
