"""Driver core for the ST LPS331A / LPS25H / LPS22H pressure sensors."""

from .core.context import Context
from .core.errors import (
    Cancelled,
    DeadlineExceeded,
    LPSenseError,
    TransportFailure,
    UnknownVariantForOperation,
    UnsupportedAddress,
    UnsupportedChip,
)
from .device import Device, Mode, Opts, State, open_i2c, open_over_bus, open_spi
from .sensors.readings import SensorReading

__version__ = "0.1.0"

__all__ = [
    "Context",
    "Device",
    "Mode",
    "Opts",
    "State",
    "SensorReading",
    "open_i2c",
    "open_over_bus",
    "open_spi",
    "LPSenseError",
    "UnsupportedAddress",
    "UnsupportedChip",
    "TransportFailure",
    "Cancelled",
    "DeadlineExceeded",
    "UnknownVariantForOperation",
]
