"""
Shared test fixtures and sample inputs for fpga-pinout tests.

Sample pin files are defined inline as module-level constants so tests
never depend on vendor files being present.  If a sample changes, the
expectations noted next to it change too.
"""

import pytest

from fpga_pinout.grid import grid_to_position, parse_grid_position
from fpga_pinout.models import Pin, PinDirection, PinType

# ---------------------------------------------------------------------------
# Xilinx package file: banner, header, 8 pins, "Total Number of Pins" footer
# ---------------------------------------------------------------------------
XILINX_SAMPLE = """\
Device/Package xc7a35tcpg236 9/18/2015 10:38:09

Pin,Pin Name,Memory Byte Group,Bank,VCCAUX Group,Super Logic Region,I/O Type,No-Connect
A1,GND,NA,NA,NA,NA,NA,NA
A2,MGTPTXN1_216,NA,216,NA,NA,GTP,NA
A3,IO_L6N_T0_VREF_34,0,34,NA,NA,HR,NA
C3,IO_L6P_T0_34,0,34,NA,NA,HR,NA
E3,IO_L12P_T1_MRCC_35,1,35,NA,NA,HR,NA
W5,IO_L12P_T1_MRCC_14,1,14,NA,NA,HR,NA
U16,IO_L23N_T3_A02_D18_14,3,14,NA,NA,HR,NA
AB12,VCCO_34,NA,34,NA,NA,NA,NA
Total Number of Pins, 236
"""

# ---------------------------------------------------------------------------
# Quartus .pin report: comment banner, CHIP line, ":"-separated table
# ---------------------------------------------------------------------------
QUARTUS_SAMPLE = """\
 -- Copyright (C) 2020  Intel Corporation. All rights reserved.
 --
CHIP  "top"  ASSIGNED TO AN: EP4CE22F17C6

Pin Name/Usage               : Location  : Dir.   : I/O Standard      : Voltage : I/O Bank  : User Assignment
-------------------------------------------------------------------------------------------------------------
GND                          : A1        : gnd    :                   :         :           :
clk                          : E1        : input  : 3.3-V LVTTL       :         : 1         : Y
led[0]                       : A15       : output : 3.3-V LVTTL       :         : 7         : Y
VCCIO8                       : A16       : power  :                   : 3.3V    : 8         :
RESERVED_INPUT_WITH_WEAK_PULLUP : B1     :        :                   :         : 1         :
"""

# ---------------------------------------------------------------------------
# Generic pin list with a header; validates without issues
# ---------------------------------------------------------------------------
GENERIC_SAMPLE = """\
Pin,Signal,Direction,Voltage,Bank
A1,CLK_P,Input,1.8V,10
A2,CLK_N,Input,1.8V,10
B1,LED0,Output,3.3V,11
B2,,Input,3.3V,11
"""

# ---------------------------------------------------------------------------
# Generic pin list without a header (read positionally)
# ---------------------------------------------------------------------------
GENERIC_HEADERLESS_SAMPLE = """\
A1,CLK,Input,3.3V
A2,DATA0,Output,3.3V
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def make_pin():
    """Factory for hand-built pins with predictable ids (``pin-<number>``)."""

    def _make(
        pin_number,
        pin_name=None,
        signal_name="",
        bank=None,
        voltage="3.3V",
        pin_type=PinType.IO,
        io_standard=None,
        pin_id=None,
    ):
        grid = parse_grid_position(pin_number)
        return Pin(
            id=pin_id or f"pin-{pin_number}",
            pin_number=pin_number,
            pin_name=pin_name or pin_number,
            signal_name=signal_name,
            direction=PinDirection.UNSPECIFIED,
            pin_type=pin_type,
            voltage=voltage,
            package_pin=pin_number,
            grid_position=grid,
            position=grid_to_position(grid),
            bank=bank,
            attributes={"io_standard": io_standard} if io_standard else {},
        )

    return _make


@pytest.fixture
def counter_ids():
    """Deterministic id factory: ``id-1``, ``id-2``, ..."""
    state = {"n": 0}

    def _next():
        state["n"] += 1
        return f"id-{state['n']}"

    return _next


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full import pipeline)",
    )
