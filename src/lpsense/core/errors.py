"""Exception hierarchy shared by the transport, protocol and device layers."""

from __future__ import annotations

from typing import List, Optional


class LPSenseError(Exception):
    """
    Base class for every error raised by ``lpsense``.

    Public device operations add their name (and the chip name, once known)
    through :meth:`within` before re-raising, so the rendered message reads
    ``"lps25h: sense: iw: [Errno 121] Remote I/O error"`` while the exception
    type stays the same for ``except`` clauses.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.context: List[str] = []

    def within(self, operation: str, chip: Optional[str] = None) -> "LPSenseError":
        """Prepend ``operation`` (and ``chip``) to the context; return ``self``."""
        self.context.insert(0, operation)
        if chip:
            self.context.insert(0, chip.lower())
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class UnsupportedAddress(LPSenseError, ValueError):
    """The requested I2C address is not one the chip family answers on."""

    def __init__(self, address: Optional[int]) -> None:
        if address is None:
            super().__init__("an I2C address is required")
        else:
            super().__init__(f"given address 0x{address:02x} not supported by device")
        self.address = address


class UnsupportedChip(LPSenseError):
    """WHO_AM_I returned a value outside the known variant set."""

    def __init__(self, chip_id: int) -> None:
        super().__init__(f"unexpected chip type 0x{chip_id:02x}")
        self.chip_id = chip_id


class TransportFailure(LPSenseError):
    """A bus transaction failed; ``__cause__`` holds the original error."""

    def __init__(self, direction: str, framing: str, cause: BaseException) -> None:
        super().__init__(f"{framing}{direction[0]}: {cause}")
        self.direction = direction
        self.framing = framing


class Cancelled(LPSenseError):
    """The caller's context was cancelled while waiting."""


class DeadlineExceeded(Cancelled):
    """The caller's context deadline passed while waiting."""


class UnknownVariantForOperation(LPSenseError):
    """The resolved variant has no defined behaviour for the operation."""


__all__ = [
    "LPSenseError",
    "UnsupportedAddress",
    "UnsupportedChip",
    "TransportFailure",
    "Cancelled",
    "DeadlineExceeded",
    "UnknownVariantForOperation",
]
