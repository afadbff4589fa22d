"""One-shot delayed work measured in real seconds."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Timer:
    """One-shot countdown. Fires when remaining reaches 0, then is dropped."""

    name: str
    remaining: float
    data: dict[str, Any] = field(default_factory=dict)


class TimerQueue:
    def __init__(self) -> None:
        self._timers: list[Timer] = []

    def add(self, name: str, delay: float, **data: Any) -> Timer:
        timer = Timer(name=name, remaining=delay, data=data)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> list[Timer]:
        """Count every timer down and return those that fired, in insertion order."""
        fired: list[Timer] = []
        pending: list[Timer] = []
        for timer in self._timers:
            timer.remaining -= seconds
            if timer.remaining <= 0:
                fired.append(timer)
            else:
                pending.append(timer)
        self._timers = pending
        return fired

    def pending(self, name: str | None = None) -> list[Timer]:
        if name is None:
            return list(self._timers)
        return [t for t in self._timers if t.name == name]

    def clear(self) -> None:
        self._timers.clear()

    def __len__(self) -> int:
        return len(self._timers)
