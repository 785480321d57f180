from __future__ import annotations

from typing import Callable, Optional, Protocol

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    """A host loop that calls ``callback(elapsed)`` once per frame."""

    def start(self, callback: FrameCallback) -> None:
        ...

    def stop(self) -> None:
        ...


class ManualFrameScheduler:
    """Frame scheduler driven by hand; used headless and in tests."""

    def __init__(self) -> None:
        self._callback: Optional[FrameCallback] = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: FrameCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def advance(self, elapsed: float) -> None:
        if self._callback is None:
            return
        self.frames += 1
        self._callback(elapsed)


class DropScheduler:
    """Gravity timer.

    Accumulates elapsed time and fires ``on_drop`` once the drop interval is
    reached, at most once per ``advance`` call. The accumulator restarts from
    zero after every drop and on pause/resume, so time spent paused is never
    carried into the next interval.
    """

    def __init__(self, interval: float, on_drop: Callable[[], None]) -> None:
        self._interval = 0.0
        self.interval = interval
        self.on_drop = on_drop
        self.accumulated = 0.0
        self.paused = False

    @property
    def interval(self) -> float:
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"drop interval must be positive, got {value}")
        self._interval = float(value)

    def advance(self, elapsed: float) -> bool:
        if elapsed < 0:
            raise ValueError(f"elapsed time must be non-negative, got {elapsed}")
        if self.paused:
            return False
        self.accumulated += elapsed
        if self.accumulated < self._interval:
            return False
        self.accumulated = 0.0
        self.on_drop()
        return True

    def reset(self) -> None:
        self.accumulated = 0.0

    def pause(self) -> None:
        self.paused = True
        self.accumulated = 0.0

    def resume(self) -> None:
        self.paused = False
        self.accumulated = 0.0
