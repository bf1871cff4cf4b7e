"""
Cooperative cancellation for blocking driver calls.

A :class:`Context` combines a cancellation flag with an optional monotonic
deadline. Every wait inside the driver goes through :meth:`Context.sleep`, so
cancelling a context from another thread (or a signal handler) makes the
pending wait raise :class:`~lpsense.core.errors.Cancelled` immediately.
Bus transactions themselves are never interrupted.
"""

from __future__ import annotations

import threading
import time
import weakref
from typing import Any, Callable, Optional

from .errors import Cancelled, DeadlineExceeded


class Context:
    """Cancellation token with an optional deadline (``time.monotonic`` based)."""

    def __init__(
        self,
        parent: Optional["Context"] = None,
        deadline: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._event = threading.Event()
        self._parent = parent
        self._clock = parent._clock if parent is not None else clock
        # Weak so that short-lived children (one per reading) do not pile up.
        self._children: "weakref.WeakSet[Context]" = weakref.WeakSet()

        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent._attach(self)

    # ------------------------------------------------------------------ factories
    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    def with_cancel(self) -> "Context":
        """Derive a child that is cancelled with this context or on its own."""
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> "Context":
        """Derive a child whose deadline is ``seconds`` from now."""
        return Context(parent=self, deadline=self._clock() + float(seconds))

    # ------------------------------------------------------------------ state
    def _attach(self, child: "Context") -> None:
        self._children.add(child)
        if self.cancelled:
            child.cancel()

    def cancel(self) -> None:
        """
        Cancel this context and every context derived from it.

        Takes no lock, so it is safe to call from a signal handler that
        interrupts the main thread while it is deriving a child.
        """
        self._event.set()
        for child in list(self._children):
            child.cancel()

    def close(self) -> None:
        """
        Stop the parent tracking this context once it is no longer used.

        Cancellation of the parent is still observed through :meth:`check`.
        """
        if self._parent is not None:
            self._parent._children.discard(self)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def cancelled(self) -> bool:
        ctx: Optional[Context] = self
        while ctx is not None:
            if ctx._event.is_set():
                return True
            ctx = ctx._parent
        return False

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or ``None`` without a deadline."""
        if self.deadline is None:
            return None
        return self.deadline - self._clock()

    def check(self) -> None:
        """Raise if the context is cancelled or past its deadline."""
        if self.cancelled:
            raise Cancelled("context canceled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded("context deadline exceeded")

    # ------------------------------------------------------------------ waiting
    def sleep(self, seconds: float) -> None:
        """
        Wait ``seconds`` unless the context ends first.

        Raises
        ------
        Cancelled
            If the context is (or becomes) cancelled during the wait.
        DeadlineExceeded
            If the deadline falls inside the wait.
        """
        self.check()
        timeout = max(0.0, float(seconds))
        remaining = self.remaining()
        if remaining is not None and remaining < timeout:
            if self._event.wait(max(0.0, remaining)):
                raise Cancelled("context canceled")
            raise DeadlineExceeded("context deadline exceeded")
        if self._event.wait(timeout):
            raise Cancelled("context canceled")


__all__ = ["Context"]
