"""
Raw output-register samples and their conversion to physical units.

Both output groups are little-endian:

  - TEMP_OUT_L/H  (0x2B..0x2C): signed 16-bit counts
  - PRESS_OUT_XL/L/H (0x28..0x2A): 24-bit counts, 4096 counts per hPa

Pressure goes through an integer chain in nanopascal so that values such as
1013 hPa come out exact: ``raw * (10**11 // 2048) // 2``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .variants import ChipVariant

TEMP_BYTES = 2
PRESS_BYTES = 3

# 10**11 / 4096 nPa per count, split so the intermediate stays integral.
_NPA_PER_COUNT_X2 = (1000 * 1000 * 1000 * 100) // 2048
ZERO_CELSIUS_K = 273.15


def raw_temperature(data: bytes) -> int:
    """Combine TEMP_OUT_L/H into a signed 16-bit count."""
    return int.from_bytes(bytes(data[:TEMP_BYTES]), "little", signed=True)


def raw_pressure(data: bytes) -> int:
    """
    Combine PRESS_OUT_XL/L/H into a 24-bit count.

    The value is not sign-extended: readings are non-negative in practice.
    """
    return int.from_bytes(bytes(data[:PRESS_BYTES]), "little", signed=False)


def pressure_npa(raw: int) -> int:
    """Convert 24-bit pressure counts to nanopascal."""
    return raw * _NPA_PER_COUNT_X2 // 2


def pressure_pa(raw: int) -> float:
    """Convert 24-bit pressure counts to pascal."""
    return pressure_npa(raw) / 1e9


@dataclass(frozen=True)
class RawSample:
    """Undecoded output registers, as read from the chip."""

    temperature: bytes
    pressure: bytes

    def raw_temperature(self) -> int:
        return raw_temperature(self.temperature)

    def raw_pressure(self) -> int:
        return raw_pressure(self.pressure)

    def convert(self, variant: ChipVariant) -> "SensorReading":
        return SensorReading(
            temperature_c=variant.temperature(self.raw_temperature()),
            pressure_pa=pressure_pa(self.raw_pressure()),
        )


@dataclass(frozen=True)
class SensorReading:
    temperature_c: float
    pressure_pa: float

    @property
    def temperature_k(self) -> float:
        return self.temperature_c + ZERO_CELSIUS_K

    @property
    def pressure_hpa(self) -> float:
        return self.pressure_pa / 100.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "temperature_c": self.temperature_c,
            "pressure_pa": self.pressure_pa,
            "pressure_hpa": self.pressure_hpa,
        }

    def __str__(self) -> str:
        return (
            f"Temperature: {self.temperature_c:.3f}°C, "
            f"Pressure: {self.pressure_pa / 1000.0:.3f}kPa"
        )


__all__ = [
    "TEMP_BYTES",
    "PRESS_BYTES",
    "RawSample",
    "SensorReading",
    "raw_temperature",
    "raw_pressure",
    "pressure_npa",
    "pressure_pa",
]
