"""Named positions and the single-destination movement state machine."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

MIN_TRAVEL_MS = 800.0
MS_PER_UNIT = 30.0


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    name: str


BASKING = "basking"
COOL_SIDE = "cool_side"
HIDE = "hide"
FOOD = "food"
WATER = "water"
CENTER = "center"

POSITIONS: dict[str, Position] = {
    BASKING: Position(75, 110, "basking rock"),
    COOL_SIDE: Position(15, 100, "cool side"),
    HIDE: Position(8, 95, "hide cave"),
    FOOD: Position(55, 100, "food dish"),
    WATER: Position(25, 100, "water dish"),
    CENTER: Position(45, 105, "center"),
}


def travel_time_ms(origin: Position, target: Position) -> float:
    """Walking time between two positions; horizontal distance only."""
    return max(MIN_TRAVEL_MS, abs(target.x - origin.x) * MS_PER_UNIT)


@dataclass
class Movement:
    """A walk in progress. ``purpose`` names the arrival effect."""

    origin: str
    target: str
    duration_ms: float
    elapsed_ms: float = 0.0
    purpose: str = ""
    priority: int = 0

    @property
    def progress(self) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(self.elapsed_ms / self.duration_ms, 1.0)

    @property
    def facing_left(self) -> bool:
        return POSITIONS[self.target].x < POSITIONS[self.origin].x


ArrivalFn = Callable[[Movement], None]


class Mover:
    """Tracks where the creature stands and the one walk it may be taking.

    While a walk is in flight every new command is refused. A command for
    the current position completes immediately without changing state.
    """

    def __init__(self, start: str = BASKING,
                 positions: dict[str, Position] | None = None,
                 on_arrive: ArrivalFn | None = None) -> None:
        self._positions = positions if positions is not None else POSITIONS
        if start not in self._positions:
            raise KeyError(f"Unknown position {start!r}")
        self._current = start
        self._movement: Movement | None = None
        self._on_arrive = on_arrive

    @property
    def positions(self) -> dict[str, Position]:
        return self._positions

    @property
    def current(self) -> str:
        return self._current

    @property
    def movement(self) -> Movement | None:
        return self._movement

    @property
    def target(self) -> str | None:
        return self._movement.target if self._movement is not None else None

    @property
    def is_moving(self) -> bool:
        return self._movement is not None

    def move_to(self, key: str, purpose: str = "", priority: int = 0) -> bool:
        """Start walking to *key*. Returns False if a walk is already in flight."""
        target = self._positions[key]
        if self._movement is not None:
            logger.debug("move to %s refused: already walking to %s",
                         key, self._movement.target)
            return False
        if key == self._current:
            self._arrive(Movement(origin=key, target=key, duration_ms=0.0,
                                  purpose=purpose, priority=priority))
            return True
        duration = travel_time_ms(self._positions[self._current], target)
        self._movement = Movement(origin=self._current, target=key,
                                  duration_ms=duration, purpose=purpose,
                                  priority=priority)
        return True

    def advance(self, seconds: float) -> Movement | None:
        """Progress the walk; returns the movement if it completed."""
        movement = self._movement
        if movement is None:
            return None
        movement.elapsed_ms += seconds * 1000.0
        if movement.elapsed_ms < movement.duration_ms:
            return None
        self._current = movement.target
        self._movement = None
        self._arrive(movement)
        return movement

    def reset(self, key: str = BASKING) -> None:
        if key not in self._positions:
            raise KeyError(f"Unknown position {key!r}")
        self._current = key
        self._movement = None

    def _arrive(self, movement: Movement) -> None:
        if self._on_arrive is not None:
            self._on_arrive(movement)
