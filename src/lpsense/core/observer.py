"""Diagnostic hooks for register traffic.

The protocol code reports what it does through an observer instead of logging
directly, so tests can drive it without log assertions. :class:`NullObserver`
is the default; :class:`LoggingObserver` reproduces the DEBUG trace of the
command-line tool.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Tuple

logger = logging.getLogger("lpsense.bus")


def format_byte(value: int) -> str:
    """Render a register value as ``0b........(0x..)``."""
    return f"0b{value:08b}(0x{value:02x})"


class NullObserver:
    """Observer that ignores every event."""

    def on_write(self, framing: str, pairs: Sequence[Tuple[int, int]]) -> None:
        pass

    def on_identity(self, chip_id: int, name: str, registers: Mapping[str, int]) -> None:
        pass

    def on_controls(self, snapshot: Mapping[str, str]) -> None:
        pass


class LoggingObserver(NullObserver):
    """Send observer events to :mod:`logging` at DEBUG level."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def on_write(self, framing: str, pairs: Sequence[Tuple[int, int]]) -> None:
        if not self.log.isEnabledFor(logging.DEBUG):
            return
        rendered = " ".join(f"0x{reg:02x}<-{format_byte(val)}" for reg, val in pairs)
        self.log.debug("write %s %s", framing, rendered)

    def on_identity(self, chip_id: int, name: str, registers: Mapping[str, int]) -> None:
        self.log.debug("chip id=0x%02x name=%s", chip_id, name)
        if self.log.isEnabledFor(logging.DEBUG):
            rendered = " ".join(f"{key}=0x{val:02x}" for key, val in registers.items())
            self.log.debug("registers %s", rendered)

    def on_controls(self, snapshot: Mapping[str, str]) -> None:
        if self.log.isEnabledFor(logging.DEBUG):
            rendered = " ".join(f"{key}={val}" for key, val in snapshot.items())
            self.log.debug("controls %s", rendered)


__all__ = ["NullObserver", "LoggingObserver", "format_byte"]
