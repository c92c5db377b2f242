"""Schedulers used to throttle and defer drag recomputes."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Protocol


class Handle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, fn: Callable[[], None]) -> Handle:
        ...


class _TimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    """Runs callbacks on ``threading.Timer`` threads."""

    def call_later(self, delay: float, fn: Callable[[], None]) -> Handle:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return _TimerHandle(timer)


@dataclass
class _ManualEntry:
    due: float
    seq: int
    fn: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic scheduler advanced explicitly, for tests and replays."""

    now: float = 0.0
    _pending: List[_ManualEntry] = field(default_factory=list)
    _seq: int = 0

    def call_later(self, delay: float, fn: Callable[[], None]) -> Handle:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self._seq += 1
        entry = _ManualEntry(due=self.now + delay, seq=self._seq, fn=fn)
        self._pending.append(entry)
        return entry

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._pending if not entry.cancelled)

    def advance(self, dt: float) -> int:
        """Move the clock forward and run every callback now due. Returns the count run."""

        if dt < 0:
            raise ValueError("dt must be non-negative")
        self.now += dt
        ran = 0
        while True:
            due = [e for e in self._pending if not e.cancelled and e.due <= self.now]
            if not due:
                break
            entry = min(due, key=lambda e: (e.due, e.seq))
            self._pending.remove(entry)
            entry.fn()
            ran += 1
        self._pending = [e for e in self._pending if not e.cancelled]
        return ran


@dataclass
class Stopwatch:
    """Wall-clock milliseconds since construction or the last reset."""

    started: float = field(default_factory=time.perf_counter)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0

    def reset(self) -> None:
        self.started = time.perf_counter()


__all__ = ["Handle", "ManualScheduler", "Scheduler", "Stopwatch", "ThreadingScheduler"]
