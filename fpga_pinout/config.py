"""
Configuration models and YAML I/O for fpga-pinout.

This module defines the Pydantic models that map 1:1 to an optional
``pinout.yaml``, plus helpers for loading and saving it.

Key models:
- PinoutConfig: Top-level config (parsing + validation).
- ParseSettings: Tile spacing, defaults and the bounded scan limits used
  by the format classifier and the spreadsheet detector.
- ValidationSettings: Which constraint checks run, and an optional
  replacement rule table.

Key functions:
- load_config(path) -> PinoutConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- default_config() -> PinoutConfig: All defaults.

Every field has a default, so an empty mapping (``{}``) is a valid config;
a completely empty *file* is rejected so that a truncated file is not
silently treated as "use defaults".
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from fpga_pinout.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class ParseSettings(BaseModel):
    """Import-side settings."""

    tile_spacing: int = Field(88, description="Pixel distance between adjacent balls")
    default_voltage: str = Field("3.3V", description="Voltage for rows without one")
    max_pin_number_length: int = Field(
        10, description="Longer pin-number cells are treated as metadata noise"
    )
    fast_path_scan_lines: int = Field(
        5000, description="Lines scanned for a device family's exact header prefix"
    )
    phrase_scan_lines: int = Field(
        20, description="Lines scanned for a fixed-column dialect's column phrase"
    )
    header_scan_lines: int = Field(
        1000, description="Lines scanned for a generic 'Pin'/'Ball' header"
    )
    sheet_scan_rows: int = Field(
        10, description="Spreadsheet rows scanned for a vendor pin-table header"
    )

    @model_validator(mode="after")
    def _check_positive(self) -> ParseSettings:
        for name in (
            "tile_spacing",
            "max_pin_number_length",
            "fast_path_scan_lines",
            "phrase_scan_lines",
            "header_scan_lines",
            "sheet_scan_rows",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"'{name}' must be a positive integer")
        return self


class ValidationSettings(BaseModel):
    """Validation-side settings."""

    check_pin_conflicts: bool = True
    check_differential_pairs: bool = True
    check_bank_constraints: bool = True
    rules_path: str | None = Field(
        None,
        description="YAML rule table replacing the built-in one (I/O families, pair suffixes)",
    )


class PinoutConfig(BaseModel):
    """Top-level configuration for fpga-pinout."""

    parsing: ParseSettings = Field(default_factory=ParseSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)


def default_config() -> PinoutConfig:
    return PinoutConfig()


def load_config(path: str | Path) -> PinoutConfig:
    """Load and validate pinout.yaml into a PinoutConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty or its content fails
            schema validation (e.g. a non-positive scan limit).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    try:
        config = PinoutConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid config file {path}: {exc}") from exc
    logger.info("Loaded config from %s", path)
    return config


def save_config(config: PinoutConfig, path: str | Path) -> None:
    """Serialize a PinoutConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# fpga-pinout configuration\n")
        f.write("# Edit this file to tune import scan limits and validation checks.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
