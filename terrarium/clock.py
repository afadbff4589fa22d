"""Clock, game-day conversion and the day/night cycle."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable

from terrarium.types import TickContext

NIGHT_START = 50.0
PHASE_WRAP = 100.0


class Clock:
    def __init__(self, tick_seconds: float) -> None:
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._dt = tick_seconds
        self._tick_number = 0

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> float:
        return self._tick_number * self._dt

    def advance(self) -> int:
        self._tick_number += 1
        return self._tick_number

    def context(self, stop_fn: Callable[[], None], rng: random.Random) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=self._dt,
            elapsed=self.elapsed,
            request_stop=stop_fn,
            random=rng,
        )


def age_in_days(real_age: float, seconds_per_day: float = 120.0) -> int:
    """Whole game days lived after *real_age* seconds."""
    return math.floor(real_age / seconds_per_day)


@dataclass
class DayCycle:
    """Day/night phase in [0, 100): 0-50 is day, above 50 is night."""

    phase: float = 0.0
    rate: float = 0.5

    @property
    def is_night(self) -> bool:
        return self.phase > NIGHT_START

    @property
    def at_midnight(self) -> bool:
        return 0.0 < self.phase < 1.0

    def advance(self, seconds: float) -> bool:
        """Move the phase forward and return whether it is now night."""
        self.phase = (self.phase + seconds * self.rate) % PHASE_WRAP
        return self.is_night
