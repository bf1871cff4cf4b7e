"""Scripted bus traffic shared by the device tests."""

from __future__ import annotations

from typing import Iterable, List

from lpsense.bus.playback import IO, Playback
from lpsense.core.context import Context
from lpsense.sensors.variants import VARIANTS


def i2c_open_ops(chip_id: int, ctrl_value: int = 0xFF) -> List[IO]:
    """WHO_AM_I plus the control-register snapshot taken at open time."""
    variant = VARIANTS[chip_id]
    ops = [
        IO(w=[0x0F], r=[chip_id]),
        IO(w=[variant.ctrl_reg1], r=[ctrl_value]),
        IO(w=[variant.ctrl_reg2], r=[ctrl_value]),
    ]
    if variant.res_conf:
        ops.append(IO(w=[variant.res_conf], r=[ctrl_value]))
    return ops


def spi_open_ops(chip_id: int, ctrl_value: int = 0x00) -> List[IO]:
    variant = VARIANTS[chip_id]
    ops = [
        IO(w=[0x8F, 0x00], r=[0xFF, chip_id]),
        IO(w=[variant.ctrl_reg1 | 0x80, 0x00], r=[0xFF, ctrl_value]),
        IO(w=[variant.ctrl_reg2 | 0x80, 0x00], r=[0xFF, ctrl_value]),
    ]
    if variant.res_conf:
        ops.append(IO(w=[variant.res_conf | 0x80, 0x00], r=[0xFF, ctrl_value]))
    return ops


class RecordingPlayback(Playback):
    """Playback that also keeps every write-only transaction it served."""

    def __init__(self, ops: Iterable[IO]) -> None:
        super().__init__(ops=list(ops))
        self.writes: List[bytes] = []

    def tx(self, write: bytes, read_len: int) -> bytes:
        data = super().tx(write, read_len)
        if not read_len:
            self.writes.append(bytes(write))
        return data


class CancelOnRead(Playback):
    """Playback that cancels ``ctx`` once ``after`` reads have been served."""

    def __init__(self, ops: Iterable[IO], ctx: Context, after: int) -> None:
        super().__init__(ops=list(ops))
        self.ctx = ctx
        self.after = after
        self.reads = 0

    def tx(self, write: bytes, read_len: int) -> bytes:
        data = super().tx(write, read_len)
        if read_len:
            self.reads += 1
            if self.reads == self.after:
                self.ctx.cancel()
        return data
