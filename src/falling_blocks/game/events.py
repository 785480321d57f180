from __future__ import annotations

from typing import Callable, Dict

from blinker import Signal


class EventBus:
    """Named notifications on top of blinker signals.

    Handlers are called as ``fn(sender, **payload)``. Errors raised by a
    handler propagate to whoever emitted the event.
    """

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable[..., None]) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # strong reference so lambdas and bound methods stay connected
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable[..., None]) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, sender: object = None, **payload) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(sender if sender is not None else self, **payload)


EVENT_GAME_STARTED = "game_started"      # payload: width, height
EVENT_GAME_PAUSED = "game_paused"
EVENT_GAME_RESUMED = "game_resumed"
EVENT_PIECE_LOCKED = "piece_locked"      # payload: kind, x, y
EVENT_LINES_CLEARED = "lines_cleared"    # payload: count, level
EVENT_SCORE_CHANGED = "score_changed"    # payload: score, delta
EVENT_LINES_CHANGED = "lines_changed"    # payload: lines, delta
EVENT_LEVEL_CHANGED = "level_changed"    # payload: level, drop_interval
EVENT_GAME_OVER = "game_over"            # payload: score, lines, level
