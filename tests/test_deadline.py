from __future__ import annotations

from core.deadline import Deadline


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_deadline_after_counts_down() -> None:
    clock = FakeClock(100.0)
    deadline = Deadline.after(15, clock=clock)
    assert deadline.expires_at == 115.0
    assert deadline.remaining() == 15.0

    clock.now = 110.0
    assert deadline.remaining() == 5.0
    assert not deadline.expired


def test_deadline_never_goes_negative() -> None:
    clock = FakeClock(100.0)
    deadline = Deadline.after(1, clock=clock)
    clock.now = 200.0
    assert deadline.remaining() == 0.0
    assert deadline.expired
