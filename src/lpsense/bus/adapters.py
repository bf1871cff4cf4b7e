"""Adapters from Linux userspace bus handles to the ``tx`` primitive.

Both adapters wrap a handle the caller already opened; opening and scanning
buses is left to the application (see :mod:`lpsense.tools.read_sensor`).
"""

from __future__ import annotations

from typing import Any

from smbus2 import i2c_msg


class SMBusConn:
    """
    I2C connection bound to one 7-bit address on an ``smbus2.SMBus``.

    Reads use a combined write/read ``i2c_rdwr`` so the register pointer and
    the data phase share one repeated-start transaction.
    """

    def __init__(self, bus: Any, address: int, *, owns_bus: bool = False) -> None:
        self.bus = bus
        self.address = address
        self.owns_bus = owns_bus

    def tx(self, write: bytes, read_len: int) -> bytes:
        if read_len <= 0:
            self.bus.i2c_rdwr(i2c_msg.write(self.address, bytes(write)))
            return b""
        wmsg = i2c_msg.write(self.address, bytes(write))
        rmsg = i2c_msg.read(self.address, read_len)
        self.bus.i2c_rdwr(wmsg, rmsg)
        return bytes(list(rmsg))

    def close(self) -> None:
        if self.owns_bus:
            self.bus.close()

    def __repr__(self) -> str:
        return f"SMBusConn(address=0x{self.address:02x})"


class SpiDevConn:
    """Full-duplex SPI connection on a ``spidev.SpiDev`` (mode 3 or 0, 8 bit)."""

    def __init__(self, spi: Any, *, owns_device: bool = False) -> None:
        self.spi = spi
        self.owns_device = owns_device

    def tx(self, write: bytes, read_len: int) -> bytes:
        out = list(write)
        if len(out) < read_len:
            out.extend([0] * (read_len - len(out)))
        rx = self.spi.xfer2(out)
        if read_len <= 0:
            return b""
        return bytes(rx[:read_len])

    def close(self) -> None:
        if self.owns_device:
            self.spi.close()

    def __repr__(self) -> str:
        return "SpiDevConn()"


__all__ = ["SMBusConn", "SpiDevConn"]
