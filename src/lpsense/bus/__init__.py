"""Bus-agnostic register access.

:mod:`transport` frames register reads/writes for I2C or SPI, :mod:`adapters`
wraps ``smbus2``/``spidev`` handles, and :mod:`playback` replays scripted
transactions for tests.
"""

from .transport import (
    READ_FLAG,
    AddressFrame,
    BusKind,
    Conn,
    FlagFrame,
    Frame,
    RegisterTransport,
    frame_for,
)
from .adapters import SMBusConn, SpiDevConn
from .playback import IO, Playback, PlaybackMismatch

__all__ = [
    "READ_FLAG",
    "AddressFrame",
    "BusKind",
    "Conn",
    "FlagFrame",
    "Frame",
    "RegisterTransport",
    "frame_for",
    "SMBusConn",
    "SpiDevConn",
    "IO",
    "Playback",
    "PlaybackMismatch",
]
