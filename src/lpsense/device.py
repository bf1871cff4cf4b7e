"""
Driver for the LPS331A / LPS25H / LPS22H pressure sensors.

A :class:`Device` is created through :func:`open_i2c`, :func:`open_spi` or the
generic :func:`open_over_bus`. Construction reads WHO_AM_I, selects the chip
variant, logs a snapshot of the control registers and applies the requested
measurement mode:

- ``Mode.CONTINUOUS`` (default): CTRL_REG1 is written once and the chip
  free-runs at its default data rate; :meth:`Device.sense` only reads the
  output registers.
- ``Mode.ONE_SHOT``: the chip stays powered down; every :meth:`Device.sense`
  powers it up, triggers one conversion and polls for completion.

Blocking waits take a :class:`~lpsense.core.context.Context`; cancelling it
aborts the wait with :class:`~lpsense.core.errors.Cancelled`. A ``Device`` is
not thread-safe: serialize access with a lock if it is shared.
"""

from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from .bus.adapters import SMBusConn, SpiDevConn
from .bus.transport import BusKind, Conn, RegisterTransport, frame_for
from .core.context import Context
from .core.errors import LPSenseError, UnknownVariantForOperation, UnsupportedAddress
from .core.observer import NullObserver
from .core.poll import DEFAULT_POLL_INTERVAL_S, set_and_wait_clear
from .sensors.readings import PRESS_BYTES, TEMP_BYTES, RawSample, SensorReading
from .sensors.variants import (
    BOOT,
    BURST,
    CTRL1_ONE_SHOT_READY,
    ONE_SHOT,
    PRESS_OUT_XL,
    SWRESET,
    TEMP_OUT_L,
    ChipVariant,
    ResetStyle,
    resolve_variant,
)

logger = logging.getLogger(__name__)

I2C_ADDRESSES = (0x5C, 0x5D)

BOOT_SETTLE_S = 0.010
TIMED_RESET_WAIT_S = 0.005
# PRESS_OUT_XL..TEMP_OUT_H, read once to clear STATUS_REG after a timed reset.
OUTPUT_FLUSH_BYTES = 5


class Mode(enum.Enum):
    ONE_SHOT = "oneshot"
    CONTINUOUS = "continuous"


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ONE_SHOT_ARMED = "oneshot_armed"
    CONTINUOUS_RUNNING = "continuous_running"


@dataclass
class Opts:
    """Options applied by :meth:`Device.init`."""

    mode: Mode = Mode.CONTINUOUS


def default_opts() -> Opts:
    return Opts(mode=Mode.CONTINUOUS)


def _bits(value: int) -> str:
    return f"{value:08b}(0x{value:02x})"


@dataclass(frozen=True)
class ControlSnapshot:
    """Current contents of the control registers of one variant."""

    variant: ChipVariant
    ctrl_reg1: int
    ctrl_reg2: int
    res_conf: Optional[int] = None

    def as_dict(self) -> Dict[str, str]:
        v = self.variant
        data = {
            f"CTRL_REG1(0x{v.ctrl_reg1:02x})": _bits(self.ctrl_reg1),
            f"CTRL_REG2(0x{v.ctrl_reg2:02x})": _bits(self.ctrl_reg2),
        }
        if self.res_conf is not None:
            data[f"RES_CONF(0x{v.res_conf:02x})"] = _bits(self.res_conf)
        return data


class Device:
    """Handle to one LPS pressure sensor; see the module docstring."""

    def __init__(
        self,
        transport: RegisterTransport,
        opts: Optional[Opts] = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self._transport = transport
        self._observer = transport.observer
        self.poll_interval = float(poll_interval)
        self.state = State.UNINITIALIZED
        self.name = ""

        try:
            self.variant = resolve_variant(transport)
        except LPSenseError as exc:
            raise exc.within("identify", "lps")
        self.name = self.variant.name

        self._observer.on_identity(self.variant.chip_id, self.name, self.variant.registers())
        logger.info(
            "Found %s (WHO_AM_I=0x%02x) on %s bus",
            self.name,
            self.variant.chip_id,
            transport.kind.value,
        )

        self.dump_control_registers()
        self.init(opts)

    # ------------------------------------------------------------------ internals
    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except LPSenseError as exc:
            raise exc.within(name, self.name or "lps")

    def _write(self, reg: int, value: int) -> None:
        self._transport.write_commands([(reg, value)])

    def _measure_one_shot(self, ctx: Context) -> None:
        v = self.variant

        # Power down for a clean start.
        self._write(v.ctrl_reg1, 0)

        if v.has_res_conf:
            if v.averaging_code is None:
                raise UnknownVariantForOperation(
                    f"no averaging code for chip type 0x{v.chip_id:02x}"
                )
            self._write(v.res_conf, v.averaging_code)

        self._write(v.ctrl_reg1, CTRL1_ONE_SHOT_READY)

        set_and_wait_clear(ctx, self._transport, v.ctrl_reg2, ONE_SHOT, self.poll_interval)

    def _read_outputs(self) -> RawSample:
        # PRESS_OUT_H must be the last address read for BDU to latch the
        # sample, so temperature goes first.
        temperature = self._transport.read_register(TEMP_OUT_L | BURST, TEMP_BYTES)
        pressure = self._transport.read_register(PRESS_OUT_XL | BURST, PRESS_BYTES)
        return RawSample(temperature=temperature, pressure=pressure)

    def _acquire(self, ctx: Optional[Context]) -> RawSample:
        if self.state is State.ONE_SHOT_ARMED:
            self._measure_one_shot(ctx or Context.background())
        return self._read_outputs()

    def _reset_timed(self, ctx: Context) -> None:
        reg2 = self.variant.ctrl_reg2
        self._write(reg2, SWRESET)
        ctx.sleep(TIMED_RESET_WAIT_S)
        # SWRESET is not cleared by the hardware on this variant.
        self._write(reg2, 0)
        ctx.sleep(TIMED_RESET_WAIT_S)
        self._transport.read_register(PRESS_OUT_XL | BURST, OUTPUT_FLUSH_BYTES)

    # ------------------------------------------------------------------ properties
    @property
    def bus_kind(self) -> BusKind:
        return self._transport.kind

    @property
    def transport(self) -> RegisterTransport:
        return self._transport

    # ------------------------------------------------------------------ operations
    def init(self, opts: Optional[Opts] = None) -> None:
        """Apply ``opts`` (continuous mode when ``None``)."""
        opts = opts or default_opts()
        # Accepts the enum or its string value; anything else is a ValueError.
        mode = Mode(opts.mode)
        with self._operation("init"):
            if mode is Mode.ONE_SHOT:
                self.state = State.ONE_SHOT_ARMED
                return
            self._write(self.variant.ctrl_reg1, self.variant.initial_control_byte)
            self.state = State.CONTINUOUS_RUNNING

    def boot(self, ctx: Optional[Context] = None) -> None:
        """Reload trimming parameters (BOOT, CTRL_REG2 bit 7)."""
        ctx = ctx or Context.background()
        with self._operation("boot"):
            set_and_wait_clear(ctx, self._transport, self.variant.ctrl_reg2, BOOT, self.poll_interval)
            ctx.sleep(BOOT_SETTLE_S)

    def software_reset(self, ctx: Optional[Context] = None) -> None:
        """Reset the user registers (SWRESET, CTRL_REG2 bit 2)."""
        ctx = ctx or Context.background()
        with self._operation("swreset"):
            style = self.variant.reset_style
            if style is ResetStyle.TIMED:
                self._reset_timed(ctx)
            elif style is ResetStyle.POLL:
                set_and_wait_clear(
                    ctx, self._transport, self.variant.ctrl_reg2, SWRESET, self.poll_interval
                )
            else:
                raise UnknownVariantForOperation(
                    f"unknown device type: 0x{self.variant.chip_id:02x}"
                )

    def read_raw(self, ctx: Optional[Context] = None) -> RawSample:
        """Return the undecoded output registers (one-shot aware)."""
        with self._operation("read_raw"):
            return self._acquire(ctx)

    def sense(self, ctx: Optional[Context] = None) -> SensorReading:
        """Measure (in one-shot mode) and return temperature and pressure."""
        with self._operation("sense"):
            sample = self._acquire(ctx)
            return sample.convert(self.variant)

    def dump_control_registers(self) -> ControlSnapshot:
        """Read CTRL_REG1, CTRL_REG2 and RES_CONF (if present)."""
        v = self.variant
        with self._operation("show_ctrls"):
            reg1 = self._transport.read_byte(v.ctrl_reg1)
            reg2 = self._transport.read_byte(v.ctrl_reg2)
            res_conf = self._transport.read_byte(v.res_conf) if v.has_res_conf else None
        snapshot = ControlSnapshot(variant=v, ctrl_reg1=reg1, ctrl_reg2=reg2, res_conf=res_conf)
        self._observer.on_controls(snapshot.as_dict())
        return snapshot

    # ------------------------------------------------------------------ lifecycle
    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "Device":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Device(name={self.name!r}, bus={self.bus_kind.value}, state={self.state.value})"


def open_over_bus(
    conn: Conn,
    bus_kind: BusKind | str,
    address: Optional[int] = None,
    opts: Optional[Opts] = None,
    observer: Optional[NullObserver] = None,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL_S,
) -> Device:
    """
    Open a device on an already-connected bus.

    For I2C, ``conn`` must already be bound to ``address``; the address is
    checked against the two the chips answer on before any traffic.
    """
    kind = BusKind(bus_kind)
    if kind is BusKind.I2C and address not in I2C_ADDRESSES:
        raise UnsupportedAddress(address).within("open", "lps")
    transport = RegisterTransport(conn, frame_for(kind), observer)
    return Device(transport, opts, poll_interval=poll_interval)


def open_i2c(
    bus: Any,
    address: int,
    opts: Optional[Opts] = None,
    observer: Optional[NullObserver] = None,
    **kwargs: Any,
) -> Device:
    """
    Open a device at ``address`` (0x5C or 0x5D) on an ``smbus2.SMBus``.

    Binding the connection issues no traffic; :func:`open_over_bus` rejects
    other addresses before the first transaction.
    """
    return open_over_bus(SMBusConn(bus, address), BusKind.I2C, address, opts, observer, **kwargs)


def open_spi(
    spi: Any,
    opts: Optional[Opts] = None,
    observer: Optional[NullObserver] = None,
    **kwargs: Any,
) -> Device:
    """Open a device on a ``spidev.SpiDev`` (SPI mode 3 or 0, 8-bit words)."""
    return open_over_bus(SpiDevConn(spi), BusKind.SPI, None, opts, observer, **kwargs)


__all__ = [
    "I2C_ADDRESSES",
    "Mode",
    "State",
    "Opts",
    "default_opts",
    "ControlSnapshot",
    "Device",
    "open_over_bus",
    "open_i2c",
    "open_spi",
]
