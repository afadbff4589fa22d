"""Report sink: leveled messages, notifications and animation cues for the presentation."""
from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

from terrarium.types import INFO, LEVELS

logger = logging.getLogger(__name__)

MESSAGE = "message"
NOTIFICATION = "notification"
ANIMATION = "animation"
CHANNELS = (MESSAGE, NOTIFICATION, ANIMATION)


@dataclass
class Report:
    tick: int
    time: float
    channel: str
    level: str
    text: str
    kind: str = ""
    data: dict[str, Any] = field(default_factory=dict)


_Handler = Callable[[Report], None]


class EventLog:
    """Bounded history of reports plus push delivery to subscribers.

    Subscriber exceptions are logged and swallowed so a broken renderer
    never interrupts the simulation.
    """

    def __init__(self, max_entries: int = 20,
                 clock_fn: Callable[[], float] = time.time,
                 tick_fn: Callable[[], int] | None = None) -> None:
        self._max = max_entries
        maxlen = max_entries if max_entries > 0 else None
        self._reports: deque[Report] = deque(maxlen=maxlen)
        self._clock_fn = clock_fn
        self._tick_fn = tick_fn
        self._subscribers: list[_Handler] = []

    def subscribe(self, handler: _Handler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: _Handler) -> None:
        try:
            self._subscribers.remove(handler)
        except ValueError:
            pass

    def emit(self, channel: str, level: str, text: str, kind: str = "",
             **data: Any) -> Report:
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel {channel!r}")
        if level not in LEVELS:
            raise ValueError(f"Unknown level {level!r}")
        tick = self._tick_fn() if self._tick_fn is not None else 0
        report = Report(tick=tick, time=self._clock_fn(), channel=channel,
                        level=level, text=text, kind=kind, data=data)
        self._reports.append(report)
        for handler in list(self._subscribers):
            try:
                handler(report)
            except Exception:
                logger.exception("report handler failed for %r", text)
        return report

    def message(self, level: str, text: str, kind: str = "", **data: Any) -> Report:
        return self.emit(MESSAGE, level, text, kind, **data)

    def notify(self, level: str, text: str, kind: str = "", **data: Any) -> Report:
        return self.emit(NOTIFICATION, level, text, kind, **data)

    def cue(self, kind: str, **data: Any) -> Report:
        return self.emit(ANIMATION, INFO, "", kind, **data)

    def query(self, channel: str | None = None, level: str | None = None,
              kind: str | None = None) -> list[Report]:
        result: list[Report] = list(self._reports)
        if channel is not None:
            result = [r for r in result if r.channel == channel]
        if level is not None:
            result = [r for r in result if r.level == level]
        if kind is not None:
            result = [r for r in result if r.kind == kind]
        return result

    def last(self, kind: str) -> Report | None:
        for r in reversed(self._reports):
            if r.kind == kind:
                return r
        return None

    def clear(self) -> None:
        self._reports.clear()

    def __len__(self) -> int:
        return len(self._reports)
