"""
Register access over an injected bus connection.

The chips speak the same register protocol over I2C and SPI, but the bytes on
the wire differ:

- I2C (:class:`AddressFrame`): the register index is written as one byte and
  the data is read back; writes may carry several ``(reg, value)`` pairs in one
  transaction.
- SPI (:class:`FlagFrame`): bit 7 of the register byte is the R/W flag. A read
  clocks one extra byte and the first received byte (received while the
  address was being shifted out) is dropped. Writes are one pair per
  transaction.

The connection only needs ``tx(write: bytes, read_len: int) -> bytes``.
"""

from __future__ import annotations

import enum
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from ..core.errors import LPSenseError, TransportFailure
from ..core.observer import NullObserver

READ_FLAG = 0x80

Pair = Tuple[int, int]


class Conn(Protocol):
    """Minimal half-duplex bus connection."""

    def tx(self, write: bytes, read_len: int) -> bytes:
        ...


class BusKind(str, enum.Enum):
    I2C = "i2c"
    SPI = "spi"


class Frame:
    """Byte layout of register transactions for one bus kind."""

    kind: BusKind
    tag: str

    def read_request(self, reg: int, length: int) -> Tuple[bytes, int]:
        """Return ``(bytes to write, number of bytes to read)``."""
        raise NotImplementedError

    def read_payload(self, raw: bytes, length: int) -> bytes:
        """Strip framing from the bytes returned by the connection."""
        raise NotImplementedError

    def write_transactions(self, pairs: Sequence[Pair]) -> List[bytes]:
        """Split ``pairs`` into the write transactions to issue, in order."""
        raise NotImplementedError


class AddressFrame(Frame):
    kind = BusKind.I2C
    tag = "i"

    def read_request(self, reg: int, length: int) -> Tuple[bytes, int]:
        return bytes([reg & 0xFF]), length

    def read_payload(self, raw: bytes, length: int) -> bytes:
        return bytes(raw[:length])

    def write_transactions(self, pairs: Sequence[Pair]) -> List[bytes]:
        payload = bytearray()
        for reg, value in pairs:
            payload += bytes([reg & 0xFF, value & 0xFF])
        return [bytes(payload)]


class FlagFrame(Frame):
    kind = BusKind.SPI
    tag = "s"

    def read_request(self, reg: int, length: int) -> Tuple[bytes, int]:
        # Filler bytes only keep the clock running while data is shifted in.
        return bytes([(reg | READ_FLAG) & 0xFF]) + bytes(length), length + 1

    def read_payload(self, raw: bytes, length: int) -> bytes:
        return bytes(raw[1 : length + 1])

    def write_transactions(self, pairs: Sequence[Pair]) -> List[bytes]:
        return [bytes([reg & ~READ_FLAG & 0xFF, value & 0xFF]) for reg, value in pairs]


def frame_for(kind: BusKind | str) -> Frame:
    """Return the frame implementation for ``kind``."""
    kind = BusKind(kind)
    if kind is BusKind.SPI:
        return FlagFrame()
    return AddressFrame()


class RegisterTransport:
    """Read and write chip registers through ``conn`` using ``frame``."""

    def __init__(self, conn: Conn, frame: Frame, observer: Optional[NullObserver] = None) -> None:
        self.conn = conn
        self.frame = frame
        self.observer = observer or NullObserver()

    @property
    def kind(self) -> BusKind:
        return self.frame.kind

    def _tx(self, direction: str, write: bytes, read_len: int) -> bytes:
        try:
            result = self.conn.tx(write, read_len)
        except LPSenseError:
            raise
        except Exception as exc:
            raise TransportFailure(direction, self.frame.tag, exc) from exc
        return bytes(result or b"")

    def read_register(self, reg: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``reg``."""
        if length <= 0:
            raise ValueError(f"length must be a positive integer, got {length}")
        write, read_len = self.frame.read_request(reg, length)
        raw = self._tx("read", write, read_len)
        if len(raw) < read_len:
            raise TransportFailure(
                "read",
                self.frame.tag,
                OSError(f"short read: expected {read_len} bytes, got {len(raw)}"),
            )
        return self.frame.read_payload(raw, length)

    def read_byte(self, reg: int) -> int:
        return self.read_register(reg, 1)[0]

    def write_commands(self, pairs: Iterable[Pair]) -> None:
        """Write each ``(reg, value)`` pair, in order."""
        pairs = [(int(reg), int(value)) for reg, value in pairs]
        if not pairs:
            return
        self.observer.on_write(self.frame.tag, pairs)
        for payload in self.frame.write_transactions(pairs):
            self._tx("write", payload, 0)

    def close(self) -> None:
        close = getattr(self.conn, "close", None)
        if callable(close):
            close()


__all__ = [
    "READ_FLAG",
    "Conn",
    "BusKind",
    "Frame",
    "AddressFrame",
    "FlagFrame",
    "frame_for",
    "RegisterTransport",
]
