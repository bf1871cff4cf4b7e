"""Chip-specific data: variant register maps and sample conversion.

:mod:`variants` holds the closed set of supported chips (LPS331A, LPS25H,
LPS22H) and the WHO_AM_I lookup; :mod:`readings` decodes the output registers
into :class:`SensorReading` values.
"""

from .variants import (
    LPS22H,
    LPS25H,
    LPS331A,
    VARIANTS,
    ChipVariant,
    ResetStyle,
    resolve_variant,
    variant_for_id,
)
from .readings import RawSample, SensorReading, pressure_pa, raw_pressure, raw_temperature

__all__ = [
    "LPS22H",
    "LPS25H",
    "LPS331A",
    "VARIANTS",
    "ChipVariant",
    "ResetStyle",
    "resolve_variant",
    "variant_for_id",
    "RawSample",
    "SensorReading",
    "pressure_pa",
    "raw_pressure",
    "raw_temperature",
]
