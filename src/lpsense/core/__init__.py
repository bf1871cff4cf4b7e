"""Protocol building blocks shared by every chip variant.

Errors, the cancellation context, the diagnostic observer and the
set-and-poll loop used for the self-clearing command bits.
"""

from .errors import (
    Cancelled,
    DeadlineExceeded,
    LPSenseError,
    TransportFailure,
    UnknownVariantForOperation,
    UnsupportedAddress,
    UnsupportedChip,
)
from .context import Context
from .observer import LoggingObserver, NullObserver
from .poll import DEFAULT_POLL_INTERVAL_S, set_and_wait_clear

__all__ = [
    "LPSenseError",
    "UnsupportedAddress",
    "UnsupportedChip",
    "TransportFailure",
    "Cancelled",
    "DeadlineExceeded",
    "UnknownVariantForOperation",
    "Context",
    "NullObserver",
    "LoggingObserver",
    "DEFAULT_POLL_INTERVAL_S",
    "set_and_wait_clear",
]
