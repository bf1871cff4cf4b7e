"""Set-and-poll handling for the self-clearing command bits of CTRL_REG2."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .context import Context

if TYPE_CHECKING:
    from ..bus.transport import RegisterTransport

logger = logging.getLogger(__name__)

# BOOT takes about 2.2 ms, SWRESET a few microseconds (LPS25H datasheet).
DEFAULT_POLL_INTERVAL_S = 0.005


def set_and_wait_clear(
    ctx: Context,
    transport: RegisterTransport,
    reg: int,
    mask: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL_S,
) -> int:
    """
    Write ``mask`` to ``reg`` and poll until the hardware clears those bits.

    The write is issued once; only the read is repeated. There is no retry
    limit, so the caller bounds the wait through ``ctx`` (cancellation or
    deadline).

    Returns
    -------
    int
        Number of reads it took to observe the cleared flag.

    Raises
    ------
    Cancelled
        If ``ctx`` ends while waiting between reads.
    TransportFailure
        If the write or any read fails.
    """
    transport.write_commands([(reg, mask)])

    polls = 0
    while True:
        value = transport.read_byte(reg)
        polls += 1
        if value & mask == 0:
            if polls > 1:
                logger.debug("0x%02x flag 0x%02x cleared after %d polls", reg, mask, polls)
            return polls
        ctx.sleep(poll_interval)


__all__ = ["DEFAULT_POLL_INTERVAL_S", "set_and_wait_clear"]
