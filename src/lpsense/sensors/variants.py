"""
Chip variants of the LPS pressure sensor family and their register maps.

The variant is identified once, from WHO_AM_I (0x0F), and fixes:

========  ====  =========  =========  ========  =====  ==
Variant   ID    CTRL_REG1  CTRL_REG2  RES_CONF  ODR    PD
========  ====  =========  =========  ========  =====  ==
LPS331A   0xBB  0x20       0x21       0x10      0b110  1
LPS25H    0xBD  0x20       0x21       0x10      0b011  1
LPS22H    0xB1  0x10       0x11       (none)    0b110  0
========  ====  =========  =========  ========  =====  ==

The default ODR codes select 12.5 Hz on LPS331A and LPS25H, and 10 Hz on
LPS22H, which also has no PD bit (it powers up through the ODR field).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TYPE_CHECKING

from ..core.errors import UnsupportedChip

if TYPE_CHECKING:
    from ..bus.transport import RegisterTransport

WHO_AM_I = 0x0F

# Output registers (shared by the whole family). 0x80 requests an
# auto-incremented burst on I2C.
PRESS_OUT_XL = 0x28
TEMP_OUT_L = 0x2B
BURST = 0x80

# CTRL_REG1 value used by the one-shot sequence: PD=1 (active) and BDU=1.
CTRL1_ONE_SHOT_READY = 0b10000100

# CTRL_REG2 self-clearing command bits.
BOOT = 0b10000000
SWRESET = 0b00000100
ONE_SHOT = 0b00000001


class ResetStyle(enum.Enum):
    """How SWRESET completes on a variant."""

    POLL = "poll"  # SWRESET self-clears; poll it like BOOT
    TIMED = "timed"  # SWRESET stays set; clear it by hand after a fixed wait


def lps331_temperature(raw: int) -> float:
    """42.5 °C offset, 480 counts per °C."""
    return 42.5 + raw / 480.0


def centi_celsius(raw: int) -> float:
    """100 counts per °C, no offset."""
    return raw / 100.0


@dataclass(frozen=True)
class ChipVariant:
    chip_id: int
    name: str
    ctrl_reg1: int
    ctrl_reg2: int
    res_conf: int
    odr: int
    power_down: int
    temperature_law: Callable[[int], float]
    averaging_code: Optional[int] = None
    reset_style: Optional[ResetStyle] = None

    @property
    def initial_control_byte(self) -> int:
        """CTRL_REG1 value for continuous sampling at the default data rate."""
        return ((self.power_down & 0x1) << 7) | ((self.odr & 0x7) << 4)

    @property
    def has_res_conf(self) -> bool:
        return self.res_conf != 0

    def registers(self) -> Dict[str, int]:
        return {
            "CTRL_REG1": self.ctrl_reg1,
            "CTRL_REG2": self.ctrl_reg2,
            "RES_CONF": self.res_conf,
            "INIT_CMD": self.initial_control_byte,
        }

    def temperature(self, raw: int) -> float:
        return self.temperature_law(raw)


LPS331A = ChipVariant(
    chip_id=0xBB,
    name="LPS331A",
    ctrl_reg1=0x20,
    ctrl_reg2=0x21,
    res_conf=0x10,
    odr=0b110,
    power_down=1,
    temperature_law=lps331_temperature,
    # AVGT2..0 = 111, AVGP3..0 = 1010 (512 pressure samples)
    averaging_code=0b01111010,
    reset_style=ResetStyle.TIMED,
)

LPS25H = ChipVariant(
    chip_id=0xBD,
    name="LPS25H",
    ctrl_reg1=0x20,
    ctrl_reg2=0x21,
    res_conf=0x10,
    odr=0b011,
    power_down=1,
    temperature_law=centi_celsius,
    # AVGT1..0 = 11 (64 samples), AVGP1..0 = 11 (512 samples)
    averaging_code=0b00001111,
    reset_style=ResetStyle.POLL,
)

LPS22H = ChipVariant(
    chip_id=0xB1,
    name="LPS22H",
    ctrl_reg1=0x10,
    ctrl_reg2=0x11,
    res_conf=0x00,
    odr=0b110,
    power_down=0,
    temperature_law=centi_celsius,
    reset_style=ResetStyle.POLL,
)

VARIANTS: Dict[int, ChipVariant] = {v.chip_id: v for v in (LPS331A, LPS25H, LPS22H)}


def variant_for_id(chip_id: int) -> ChipVariant:
    """Return the variant answering WHO_AM_I with ``chip_id``."""
    try:
        return VARIANTS[chip_id]
    except KeyError:
        raise UnsupportedChip(chip_id) from None


def resolve_variant(transport: "RegisterTransport") -> ChipVariant:
    """Read WHO_AM_I through ``transport`` and return the matching variant."""
    chip_id = transport.read_byte(WHO_AM_I)
    return variant_for_id(chip_id)


__all__ = [
    "WHO_AM_I",
    "PRESS_OUT_XL",
    "TEMP_OUT_L",
    "BURST",
    "CTRL1_ONE_SHOT_READY",
    "BOOT",
    "SWRESET",
    "ONE_SHOT",
    "ResetStyle",
    "ChipVariant",
    "LPS331A",
    "LPS25H",
    "LPS22H",
    "VARIANTS",
    "variant_for_id",
    "resolve_variant",
    "lps331_temperature",
    "centi_celsius",
]
