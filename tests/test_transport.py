from __future__ import annotations

from typing import List, Tuple

import pytest

from lpsense.bus.playback import IO, Playback, PlaybackMismatch
from lpsense.bus.transport import AddressFrame, BusKind, FlagFrame, RegisterTransport, frame_for
from lpsense.core.errors import TransportFailure
from lpsense.core.observer import NullObserver


class RecordingObserver(NullObserver):
    def __init__(self) -> None:
        self.writes: List[Tuple[str, list]] = []

    def on_write(self, framing, pairs) -> None:
        self.writes.append((framing, list(pairs)))


class FailingConn:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    def tx(self, write: bytes, read_len: int) -> bytes:
        self.calls += 1
        raise self.exc


def test_frame_for_selects_framing_by_bus_kind() -> None:
    assert isinstance(frame_for("i2c"), AddressFrame)
    assert isinstance(frame_for(BusKind.SPI), FlagFrame)
    with pytest.raises(ValueError):
        frame_for("uart")


def test_address_framed_read_writes_register_then_reads() -> None:
    conn = Playback.of([IO(w=[0xAB], r=[0xD0, 0x6B])])
    transport = RegisterTransport(conn, AddressFrame())

    assert transport.read_register(0xAB, 2) == bytes([0xD0, 0x6B])
    conn.close()


def test_address_framed_write_packs_pairs_into_one_transaction() -> None:
    conn = Playback.of([IO(w=[0x20, 0x00, 0x10, 0x7A])])
    transport = RegisterTransport(conn, AddressFrame())

    transport.write_commands([(0x20, 0x00), (0x10, 0x7A)])
    conn.close()


def test_flag_framed_read_sets_read_flag_and_drops_echo_byte() -> None:
    conn = Playback.of([IO(w=[0x8F, 0x00], r=[0xFF, 0xB1])])
    transport = RegisterTransport(conn, FlagFrame())

    assert transport.read_register(0x0F, 1) == bytes([0xB1])
    conn.close()


def test_flag_framed_burst_read_pads_with_filler_bytes() -> None:
    conn = Playback.of([IO(w=[0xA8, 0x00, 0x00, 0x00], r=[0x55, 0x00, 0x50, 0x3F])])
    transport = RegisterTransport(conn, FlagFrame())

    assert transport.read_register(0x28 | 0x80, 3) == bytes([0x00, 0x50, 0x3F])
    conn.close()


def test_flag_framed_write_clears_flag_and_splits_pairs() -> None:
    conn = Playback.of([IO(w=[0x20, 0xE0]), IO(w=[0x10, 0x7A])])
    transport = RegisterTransport(conn, FlagFrame())

    transport.write_commands([(0xA0, 0xE0), (0x10, 0x7A)])
    assert conn.count == 2
    conn.close()


def test_write_reports_pairs_to_observer_before_transaction() -> None:
    observer = RecordingObserver()
    conn = Playback.of([IO(w=[0x21, 0x80])])
    transport = RegisterTransport(conn, AddressFrame(), observer)

    transport.write_commands([(0x21, 0x80)])

    assert observer.writes == [("i", [(0x21, 0x80)])]


def test_empty_write_issues_no_transaction() -> None:
    conn = Playback.of([])
    transport = RegisterTransport(conn, AddressFrame())

    transport.write_commands([])
    assert conn.count == 0


def test_read_failure_is_wrapped_with_direction_and_framing() -> None:
    cause = OSError(121, "Remote I/O error")
    transport = RegisterTransport(FailingConn(cause), AddressFrame())

    with pytest.raises(TransportFailure) as info:
        transport.read_register(0x0F, 1)

    err = info.value
    assert err.direction == "read"
    assert err.framing == "i"
    assert err.__cause__ is cause
    assert str(err).startswith("ir: ")


def test_write_failure_is_not_retried() -> None:
    conn = FailingConn(OSError(5, "Input/output error"))
    transport = RegisterTransport(conn, FlagFrame())

    with pytest.raises(TransportFailure) as info:
        transport.write_commands([(0x20, 0xE0), (0x21, 0x00)])

    assert conn.calls == 1
    assert info.value.direction == "write"
    assert str(info.value).startswith("sw: ")


def test_short_read_is_a_transport_failure() -> None:
    class ShortConn:
        def tx(self, write: bytes, read_len: int) -> bytes:
            return b"\x01"

    transport = RegisterTransport(ShortConn(), AddressFrame())
    with pytest.raises(TransportFailure):
        transport.read_register(0x28 | 0x80, 3)


def test_unexpected_traffic_surfaces_as_transport_failure() -> None:
    conn = Playback.of([IO(w=[0x0F], r=[0xBB])])
    transport = RegisterTransport(conn, AddressFrame())

    with pytest.raises(TransportFailure) as info:
        transport.read_register(0x20, 1)
    assert isinstance(info.value.__cause__, PlaybackMismatch)


def test_read_rejects_non_positive_length() -> None:
    transport = RegisterTransport(Playback.of([]), AddressFrame())
    with pytest.raises(ValueError):
        transport.read_register(0x28, 0)
