"""Opt-in timing instrumentation for sensor operations."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator

DEBUG_LPSENSE = os.getenv("LPSENSE_DEBUG", "").lower() in {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def debug_enabled() -> bool:
    """Return True when ``LPSENSE_DEBUG`` asks for instrumentation."""
    return DEBUG_LPSENSE


@dataclass
class TimingStats:
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    def add(self, elapsed_ms: float) -> None:
        self.count += 1
        self.total_ms += elapsed_ms
        self.max_ms = max(self.max_ms, elapsed_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


_TIMINGS: Dict[str, TimingStats] = {}


def timing_summary() -> Dict[str, Dict[str, float]]:
    """Per-label count, mean and worst-case duration recorded by :func:`time_block`."""
    return {
        label: {"count": s.count, "mean_ms": round(s.mean_ms, 3), "max_ms": round(s.max_ms, 3)}
        for label, s in _TIMINGS.items()
    }


def reset_timings() -> None:
    _TIMINGS.clear()


@contextmanager
def time_block(
    label: str,
    *,
    emitter: Callable[[str], None] | None = None,
    enabled: bool | None = None,
) -> Iterator[None]:
    """
    Time the wrapped block when instrumentation is on.

    One-shot readings spend most of their time polling the trigger bit, so the
    running worst case is reported with every sample. When disabled the block
    runs untimed.
    """
    active = DEBUG_LPSENSE if enabled is None else enabled
    if not active:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        stats = _TIMINGS.setdefault(label, TimingStats())
        stats.add(elapsed_ms)
        target = emitter or logger.debug
        target(f"{label} took {elapsed_ms:.3f} ms (max {stats.max_ms:.3f} ms over {stats.count})")


__all__ = ["DEBUG_LPSENSE", "TimingStats", "debug_enabled", "reset_timings", "time_block", "timing_summary"]
