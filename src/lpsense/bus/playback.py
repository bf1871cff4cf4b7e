"""Scripted connection for exercising drivers without hardware."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List


class PlaybackMismatch(AssertionError):
    """The driver issued a transaction the script did not expect."""


@dataclass
class IO:
    """One expected transaction: bytes written and bytes returned."""

    w: bytes = b""
    r: bytes = b""

    def __post_init__(self) -> None:
        self.w = bytes(self.w)
        self.r = bytes(self.r)


@dataclass
class Playback:
    """
    Replay ``ops`` in order, checking every ``tx`` against the script.

    ``count`` tracks how many operations were consumed; :meth:`close` fails if
    any are left over (unless ``strict`` is off).
    """

    ops: List[IO] = field(default_factory=list)
    strict: bool = True
    count: int = 0

    @classmethod
    def of(cls, ops: Iterable[IO]) -> "Playback":
        return cls(ops=list(ops))

    def tx(self, write: bytes, read_len: int) -> bytes:
        if self.count >= len(self.ops):
            raise PlaybackMismatch(f"unexpected write {bytes(write).hex()} (no more ops)")
        expected = self.ops[self.count]
        if bytes(write) != expected.w:
            raise PlaybackMismatch(
                f"op {self.count}: unexpected write {bytes(write).hex()}, expected {expected.w.hex()}"
            )
        if read_len != len(expected.r):
            raise PlaybackMismatch(
                f"op {self.count}: unexpected read length {read_len}, expected {len(expected.r)}"
            )
        self.count += 1
        return expected.r

    @property
    def remaining(self) -> int:
        return len(self.ops) - self.count

    def close(self) -> None:
        if self.remaining and self.strict:
            raise PlaybackMismatch(f"{self.remaining} ops were not consumed")


__all__ = ["IO", "Playback", "PlaybackMismatch"]
