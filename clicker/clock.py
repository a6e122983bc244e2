"""Owned, cancelable periodic timers advanced by explicit time steps.

Nothing here reads the wall clock. A session owns a TimerGroup, feeds it
elapsed milliseconds, and cancels it when torn down; after ``cancel_all``
no callback fires again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List


@dataclass
class Timer:
    name: str
    interval_ms: int
    callback: Callable[[], None]
    elapsed_ms: int = 0
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass
class TimerGroup:
    timers: List[Timer] = field(default_factory=list)
    cancelled: bool = False

    def every(self, name: str, interval_ms: int, callback: Callable[[], None]) -> Timer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = Timer(name=name, interval_ms=interval_ms, callback=callback)
        if self.cancelled:
            timer.active = False
        self.timers.append(timer)
        return timer

    def advance(self, ms: int) -> int:
        """Advance all active timers by ``ms``; return the number of callbacks fired."""
        fired = 0
        for timer in list(self.timers):
            if not timer.active:
                continue
            timer.elapsed_ms += ms
            while timer.active and not self.cancelled and timer.elapsed_ms >= timer.interval_ms:
                timer.elapsed_ms -= timer.interval_ms
                timer.callback()
                fired += 1
        self.timers = [t for t in self.timers if t.active]
        return fired

    def cancel(self, name: str) -> None:
        for timer in self.timers:
            if timer.name == name:
                timer.cancel()

    def cancel_all(self) -> None:
        self.cancelled = True
        for timer in self.timers:
            timer.cancel()
        self.timers = []

    @property
    def active_count(self) -> int:
        return sum(1 for t in self.timers if t.active)
