from __future__ import annotations

from lpsense.tools.debug import reset_timings, time_block, timing_summary


def test_disabled_block_records_nothing() -> None:
    reset_timings()
    messages = []
    with time_block("LPS25H sense", emitter=messages.append, enabled=False):
        pass
    assert messages == []
    assert timing_summary() == {}


def test_enabled_block_accumulates_per_label() -> None:
    reset_timings()
    messages = []
    for _ in range(3):
        with time_block("LPS22H sense", emitter=messages.append, enabled=True):
            pass

    assert len(messages) == 3
    assert messages[-1].startswith("LPS22H sense took ")
    assert messages[-1].endswith("over 3)")
    summary = timing_summary()["LPS22H sense"]
    assert summary["count"] == 3
    assert summary["max_ms"] >= summary["mean_ms"] >= 0.0
    reset_timings()


def test_timing_is_recorded_when_block_raises() -> None:
    reset_timings()
    try:
        with time_block("boot", emitter=lambda _msg: None, enabled=True):
            raise RuntimeError("bus gone")
    except RuntimeError:
        pass
    assert timing_summary()["boot"]["count"] == 1
    reset_timings()
