"""
Demo script: import pin files via the public API and print a validation report.

Usage:
    uv run python scripts/run_import.py xc7a35tcpg236pkg.csv top.pin
    uv run python scripts/run_import.py --config pinout.yaml pins.xlsx

Each file is opened with ``fpga_pinout.open()``; the script logs the
detected format, per-bank utilization and every validation issue.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_import")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str]) -> tuple[str | None, list[str]]:
    """Split ``--config PATH`` from the input file list."""
    config = None
    files: list[str] = []
    it = iter(argv)
    for arg in it:
        if arg == "--config":
            config = next(it, None)
        else:
            files.append(arg)
    return config, files


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    import fpga_pinout
    from fpga_pinout.exceptions import ImportFailedError

    config_path, files = _parse_args(sys.argv[1:])
    if not files:
        log.error("No input files given")
        return 2

    failed = 0
    for input_path in files:
        if not Path(input_path).exists():
            log.warning("SKIP  %s  (file not found)", input_path)
            continue

        log.info("=" * 70)
        log.info("Processing: %s", input_path)
        log.info("=" * 70)

        try:
            pinout = fpga_pinout.open(input_path, config=config_path)
        except ImportFailedError as exc:
            log.error("FAILED  %s: %s", input_path, exc)
            failed += 1
            continue

        info = pinout.describe()
        log.info(
            "  %s format, %d pins (%d assigned), grid %d x %d, %d rows skipped",
            info.format_type, info.total_pins, info.assigned_pins,
            info.dimensions["rows"], info.dimensions["cols"], info.warning_count,
        )
        for bank in info.banks.banks:
            log.info(
                "  Bank %-10s %4d pins  %5.1f%% used",
                bank.bank_id, bank.total_pins, bank.utilization_rate,
            )

        result = pinout.validate()
        for issue in result.issues:
            log.info("  [%s] %s", issue.severity.value.upper(), issue.title)

        log.info("Done: %s\n", input_path)

    log.info("All files processed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
