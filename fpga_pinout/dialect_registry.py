"""
Dialect loader for fpga-pinout.

Loads dialect YAML files from fpga_pinout/dialects/ and provides
structured access via Pydantic models.  Each dialect defines:
- name: unique identifier (e.g., "xilinx")
- format_type: reported in ImportResult.format.type
- strategy: which extraction strategy reads its rows
  (header | fixed | transposed)
- keywords / min_matches: header classification rule
- fast_path: optional bounded literal scan that selects the dialect
  without classification (line_prefix | phrase)
- columns: logical field -> header aliases (header strategy)
- positions: logical field -> column offset (fixed / transposed strategy,
  and header-less generic rows)

New vendor layouts are added by dropping a YAML file, not by adding a
parser.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

# Directory containing dialect YAML files (sibling package)
_DIALECTS_DIR = Path(__file__).parent / "dialects"

# Logical field names a dialect may map
FIELDS = (
    "pin_number",
    "pin_name",
    "signal_name",
    "direction",
    "voltage",
    "bank",
    "memory_byte_group",
    "io_type",
    "io_standard",
    "user_assignment",
    "package_pin",
    "row",
    "col",
    "function",
)


class FastPath(BaseModel):
    """A bounded literal scan that selects a dialect directly."""
    kind: Literal["line_prefix", "phrase"]
    text: str


class Dialect(BaseModel):
    """A complete dialect definition loaded from YAML."""
    name: str
    format_type: Literal["xilinx", "quartus", "generic", "custom"]
    strategy: Literal["header", "fixed", "transposed"]
    priority: int = 50
    description: str = ""
    delimiter: str = ","
    comment_prefix: str = "#"
    classify: bool = False
    fallback: bool = False
    keywords: list[str] = Field(default_factory=list)
    min_matches: int = 0
    fast_path: FastPath | None = None
    columns: dict[str, list[str]] = Field(default_factory=dict)
    positions: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_fields(self) -> Dialect:
        unknown = (set(self.columns) | set(self.positions)) - set(FIELDS)
        if unknown:
            raise ValueError(f"Dialect '{self.name}' maps unknown fields: {sorted(unknown)}")
        if self.classify and self.min_matches < 1:
            raise ValueError(f"Dialect '{self.name}' classifies headers but has min_matches < 1")
        return self

    @property
    def expected_columns(self) -> list[str]:
        return list(self.keywords)


def load_dialect(path: Path) -> Dialect:
    """Load a single dialect YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return Dialect.model_validate(raw)


def load_all_dialects(dialects_dir: Path | None = None) -> list[Dialect]:
    """Load all dialect YAML files, sorted by priority (lowest first).

    Files that fail to load are logged and skipped.
    """
    dialects_dir = dialects_dir or _DIALECTS_DIR
    dialects: list[Dialect] = []
    for yaml_path in sorted(dialects_dir.glob("*.yaml")):
        try:
            dialect = load_dialect(yaml_path)
            dialects.append(dialect)
            logger.debug("Loaded dialect: %s from %s", dialect.name, yaml_path)
        except Exception as e:
            logger.warning("Failed to load dialect from %s: %s", yaml_path, e)
    dialects.sort(key=lambda d: d.priority)
    logger.debug("Loaded %d dialects", len(dialects))
    return dialects


_bundled: list[Dialect] | None = None


def bundled_dialects() -> list[Dialect]:
    """The packaged dialects, read from disk once per process."""
    global _bundled
    if _bundled is None:
        _bundled = load_all_dialects()
    return list(_bundled)


def get_dialect(name: str, dialects: list[Dialect]) -> Dialect:
    """Look up a dialect by name.

    Raises:
        KeyError: If no dialect has that name.
    """
    for dialect in dialects:
        if dialect.name == name:
            return dialect
    raise KeyError(f"Unknown dialect: '{name}'. Available: {[d.name for d in dialects]}")
