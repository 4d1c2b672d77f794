"""
Unit tests for config models and YAML I/O (fpga_pinout.config).

Tests Pydantic model validation, YAML serialization round-trip and
default config generation.
"""

import pytest
from pydantic import ValidationError

from fpga_pinout.config import (
    ParseSettings,
    PinoutConfig,
    ValidationSettings,
    default_config,
    load_config,
    save_config,
)
from fpga_pinout.exceptions import ConfigValidationError


# ---------------------------------------------------------------------------
# ParseSettings
# ---------------------------------------------------------------------------

class TestParseSettings:
    """Tests for ParseSettings validation."""

    def test_defaults(self):
        settings = ParseSettings()
        assert settings.tile_spacing == 88
        assert settings.default_voltage == "3.3V"
        assert settings.max_pin_number_length == 10
        assert settings.fast_path_scan_lines == 5000
        assert settings.phrase_scan_lines == 20
        assert settings.header_scan_lines == 1000
        assert settings.sheet_scan_rows == 10

    @pytest.mark.parametrize("field", ["tile_spacing", "header_scan_lines", "sheet_scan_rows"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError, match=field):
            ParseSettings(**{field: 0})


# ---------------------------------------------------------------------------
# ValidationSettings
# ---------------------------------------------------------------------------

class TestValidationSettings:

    def test_all_checks_on_by_default(self):
        settings = ValidationSettings()
        assert settings.check_pin_conflicts
        assert settings.check_differential_pairs
        assert settings.check_bank_constraints
        assert settings.rules_path is None


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------

class TestConfigIO:
    """Tests for load_config() / save_config()."""

    def test_round_trip(self, tmp_path):
        config = PinoutConfig(
            parsing=ParseSettings(tile_spacing=40, default_voltage="1.8V"),
            validation=ValidationSettings(check_bank_constraints=False),
        )
        path = tmp_path / "nested" / "pinout.yaml"
        save_config(config, path)
        assert path.read_text(encoding="utf-8").startswith("# fpga-pinout configuration")
        assert load_config(path) == config

    def test_partial_file_fills_defaults(self, tmp_path):
        path = tmp_path / "pinout.yaml"
        path.write_text("parsing:\n  tile_spacing: 50\n", encoding="utf-8")
        config = load_config(path)
        assert config.parsing.tile_spacing == 50
        assert config.parsing.header_scan_lines == 1000
        assert config.validation == ValidationSettings()

    def test_empty_mapping_is_defaults(self, tmp_path):
        path = tmp_path / "pinout.yaml"
        path.write_text("{}\n", encoding="utf-8")
        assert load_config(path) == default_config()

    def test_empty_file_rejected(self, tmp_path):
        path = tmp_path / "pinout.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="empty"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "pinout.yaml"
        path.write_text("parsing:\n  tile_spacing: -1\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="tile_spacing") as info:
            load_config(path)
        assert isinstance(info.value.__cause__, ValidationError)
