#!/usr/bin/env python3
"""
lpsense-read: take readings from an LPS331A / LPS25H / LPS22H sensor.

Each reading is printed as one JSON line on stdout:

  - timestamp_ns  : int   monotonic time in nanoseconds
  - t_s           : float seconds since the run started
  - sensor        : str   resolved chip name
  - temperature_c : float degrees Celsius
  - pressure_pa   : float pascal
  - pressure_hpa  : float hectopascal

Configuration via YAML
----------------------
``--config lps.yaml`` supplies defaults (see :mod:`lpsense.config.runtime`);
explicit command-line options override them.

Examples
--------
# One reading from the breakout at 0x5C on /dev/i2c-1
lpsense-read

# Ten one-shot readings, one per second, at 0x5D
lpsense-read --address 0x5d --oneshot --samples 10 --interval 1

# SPI on /dev/spidev0.0 with register trace
lpsense-read --bus-kind spi --bus 0 --spi-device 0 --verbose --dump
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import time
from dataclasses import replace
from typing import Optional, Sequence

from smbus2 import SMBus

from ..bus.adapters import SMBusConn, SpiDevConn
from ..config.runtime import SensorConfig, load_config
from ..core.context import Context
from ..core.errors import Cancelled, LPSenseError
from ..core.observer import LoggingObserver, NullObserver
from ..device import Device, open_over_bus
from .debug import debug_enabled, time_block, timing_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lpsense-read",
        description="Read temperature and pressure from an LPS331A/LPS25H/LPS22H sensor.",
    )
    ap.add_argument("--config", type=str, default=None, help="Path to YAML config file with defaults")
    ap.add_argument("--bus-kind", choices=["i2c", "spi"], default=None, help="Bus the sensor is wired to")
    ap.add_argument("--bus", type=int, default=None, help="I2C bus number or SPI bus number")
    ap.add_argument(
        "--address",
        type=lambda s: int(s, 0),
        default=None,
        help="I2C address (0x5c or 0x5d)",
    )
    ap.add_argument("--spi-device", type=int, default=None, help="SPI chip-select number")
    ap.add_argument("--oneshot", action="store_true", help="Power the sensor down between readings")
    ap.add_argument("--samples", type=int, default=None, help="Number of readings to take")
    ap.add_argument("--interval", type=float, default=None, help="Seconds between readings")
    ap.add_argument("--timeout", type=float, default=None, help="Upper bound in seconds for each blocking call")
    ap.add_argument("--boot", action="store_true", help="Reload trimming parameters before reading")
    ap.add_argument("--reset", action="store_true", help="Software-reset the sensor before reading")
    ap.add_argument("--dump", action="store_true", help="Print the control registers as JSON")
    ap.add_argument("--verbose", "-v", action="store_true", help="Log register traffic")
    return ap


def merge_args(cfg: SensorConfig, args: argparse.Namespace) -> SensorConfig:
    """Apply explicit command-line options on top of ``cfg`` (CLI wins)."""
    overrides = {}
    if args.bus_kind is not None:
        overrides["bus_kind"] = args.bus_kind
    if args.bus is not None:
        overrides["bus"] = args.bus
    if args.address is not None:
        overrides["address"] = args.address
    if args.spi_device is not None:
        overrides["spi_device"] = args.spi_device
    if args.oneshot:
        overrides["mode"] = "oneshot"
    if args.samples is not None:
        overrides["samples"] = args.samples
    if args.interval is not None:
        overrides["interval_s"] = args.interval
    if args.timeout is not None:
        overrides["timeout_s"] = args.timeout
    return replace(cfg, **overrides).sanitized()


def open_device(cfg: SensorConfig, observer: Optional[NullObserver] = None) -> Device:
    """Open the bus described by ``cfg`` and construct the device on it."""
    if cfg.bus_kind == "spi":
        import spidev

        spi = spidev.SpiDev()
        spi.open(cfg.bus, cfg.spi_device)
        spi.max_speed_hz = cfg.spi_speed_hz
        spi.mode = cfg.spi_mode
        conn = SpiDevConn(spi, owns_device=True)
        address = None
    else:
        conn = SMBusConn(SMBus(cfg.bus), cfg.address, owns_bus=True)
        address = cfg.address

    try:
        return open_over_bus(
            conn,
            cfg.bus_kind,
            address,
            cfg.opts(),
            observer,
            poll_interval=cfg.poll_interval_s,
        )
    except LPSenseError:
        conn.close()
        raise


def run(dev: Device, cfg: SensorConfig, args: argparse.Namespace, ctx: Context) -> None:
    if args.dump:
        print(json.dumps(dev.dump_control_registers().as_dict()), flush=True)

    if args.boot:
        with ctx.with_timeout(cfg.timeout_s) as sub:
            dev.boot(sub)
    if args.reset:
        with ctx.with_timeout(cfg.timeout_s) as sub:
            dev.software_reset(sub)
    if args.boot or args.reset:
        # Both commands restore CTRL_REG1 to its power-on value.
        dev.init(cfg.opts())

    timed = args.verbose or debug_enabled()
    start_ns = time.monotonic_ns()
    for index in range(cfg.samples):
        if index:
            ctx.sleep(cfg.interval_s)
        with time_block(f"{dev.name} sense", enabled=timed), ctx.with_timeout(cfg.timeout_s) as sub:
            reading = dev.sense(sub)
        now_ns = time.monotonic_ns()
        record = {
            "timestamp_ns": now_ns,
            "t_s": (now_ns - start_ns) / 1e9,
            "sensor": dev.name,
        }
        record.update(reading.as_dict())
        print(json.dumps(record, separators=(",", ":")), flush=True)
        logger.debug("data %s", reading)
    # Continuous reads never wait, so an interrupt during the last one
    # surfaces here.
    ctx.check()
    if timed:
        logger.debug("timings %s", timing_summary())


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    verbose = args.verbose or debug_enabled()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = merge_args(load_config(args.config), args)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    ctx = Context.background()
    previous = signal.signal(signal.SIGINT, lambda *_: ctx.cancel())
    observer = LoggingObserver() if verbose else None
    try:
        with open_device(cfg, observer) as dev:
            run(dev, cfg, args, ctx)
    except Cancelled as exc:
        print(f"Interrupted: {exc}", file=sys.stderr)
        return 130
    except (LPSenseError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous)
    return 0


if __name__ == "__main__":
    sys.exit(main())
