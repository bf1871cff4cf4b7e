"""Runtime configuration helpers for the sensor reader."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from ..device import I2C_ADDRESSES, Mode, Opts

logger = logging.getLogger(__name__)


def _parse_int(value: Any) -> int:
    """Accept ints and strings such as ``"0x5d"`` or ``"93"``."""
    if isinstance(value, str):
        return int(value.strip(), 0)
    return int(value)


def _parse_mode(value: Any) -> Mode:
    raw = str(value or "continuous").strip().lower().replace("-", "_")
    if raw in {"oneshot", "one_shot", "single", "single_shot"}:
        return Mode.ONE_SHOT
    if raw in {"continuous", "cont", "stream"}:
        return Mode.CONTINUOUS
    raise ValueError(f"Unknown measurement mode {value!r}")


@dataclass(slots=True)
class SensorConfig:
    """
    Where the sensor lives and how it is sampled.

    The defaults match a breakout on ``/dev/i2c-1`` at 0x5C, read once in
    continuous mode.
    """

    bus_kind: str = "i2c"
    bus: int = 1
    address: int = 0x5C

    spi_device: int = 0
    spi_speed_hz: int = 10_000_000
    spi_mode: int = 3

    mode: str = "continuous"
    poll_interval_s: float = 0.005
    timeout_s: float = 1.0

    samples: int = 1
    interval_s: float = 1.0

    def sanitized(self) -> SensorConfig:
        """Return a copy with normalized values and derived limits applied."""
        kind = str(self.bus_kind).strip().lower()
        if kind not in {"i2c", "spi"}:
            raise ValueError(f"bus_kind must be 'i2c' or 'spi', got {self.bus_kind!r}")
        address = _parse_int(self.address)
        if kind == "i2c" and address not in I2C_ADDRESSES:
            raise ValueError(
                f"address must be one of {', '.join(f'0x{a:02x}' for a in I2C_ADDRESSES)}, "
                f"got 0x{address:02x}"
            )
        return SensorConfig(
            bus_kind=kind,
            bus=max(0, _parse_int(self.bus)),
            address=address,
            spi_device=max(0, _parse_int(self.spi_device)),
            spi_speed_hz=max(1000, _parse_int(self.spi_speed_hz)),
            spi_mode=_parse_int(self.spi_mode) & 0x3,
            mode=_parse_mode(self.mode).value,
            poll_interval_s=max(0.0005, float(self.poll_interval_s)),
            timeout_s=max(0.01, float(self.timeout_s)),
            samples=max(1, int(self.samples)),
            interval_s=max(0.0, float(self.interval_s)),
        )

    @property
    def measurement_mode(self) -> Mode:
        return _parse_mode(self.mode)

    def opts(self) -> Opts:
        return Opts(mode=self.measurement_mode)

    def to_mapping(self) -> dict:
        """Serialize back into a mapping suitable for YAML."""
        data = asdict(self)
        data["address"] = f"0x{int(self.address):02x}"
        return {SECTION: data}


SECTION = "lps"

_FIELDS = frozenset(f.name for f in fields(SensorConfig))


def _sensor_section(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Collect sensor settings from a config document.

    Settings may sit at the top level or under an ``lps:`` section; keys in
    the section override top-level ones, so one file can also hold other
    tools' settings.
    """
    settings = {key: value for key, value in data.items() if key != SECTION}
    section = data.get(SECTION)
    if section is None:
        return settings
    if not isinstance(section, Mapping):
        raise ValueError(f"'{SECTION}' section must be a mapping, got {type(section).__name__}")
    settings.update(section)
    return settings


def config_from_mapping(data: Mapping[str, Any] | None) -> SensorConfig:
    """Build a sanitized :class:`SensorConfig`; keys it does not know are skipped."""
    if not data:
        return SensorConfig()
    settings = _sensor_section(data)
    ignored = sorted(set(settings) - _FIELDS)
    if ignored:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(map(str, ignored)))
    return SensorConfig(**{key: settings[key] for key in settings.keys() & _FIELDS}).sanitized()


def load_config(path: str | Path | None) -> SensorConfig:
    """
    Read sensor settings from a YAML file.

    No path, or a path that does not exist, yields the defaults (I2C bus 1,
    address 0x5C, continuous mode) so the CLI runs without a config file.
    """
    if path is None:
        return SensorConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        logger.debug("No sensor config at %s; using defaults", cfg_path)
        return SensorConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        document = yaml.safe_load(fh) or {}
    if not isinstance(document, Mapping):
        raise ValueError(
            f"{cfg_path}: sensor config must be a YAML mapping, got {type(document).__name__}"
        )
    return config_from_mapping(document)


__all__ = ["SECTION", "SensorConfig", "config_from_mapping", "load_config"]
