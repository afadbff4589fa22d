"""The creature record, vital clamping and mood derivation."""
from __future__ import annotations

from dataclasses import dataclass

from terrarium.types import BABY, VITALS

VITAL_MIN = 0.0
VITAL_MAX = 100.0

# (lower bound exclusive, mood) checked top to bottom.
MOOD_BANDS = ((80.0, "happy"), (60.0, "content"), (40.0, "okay"), (20.0, "unhappy"))
SLEEPING = "sleeping"
DISTRESSED = "distressed"


def clamp(value: float, lo: float = VITAL_MIN, hi: float = VITAL_MAX) -> float:
    return lo if value < lo else hi if value > hi else value


@dataclass
class Creature:
    name: str = "Spike"
    color: str = "normal"
    age: int = 0
    real_age: float = 0.0
    size: float = 4.0
    stage: str = BABY

    health: float = 100.0
    hunger: float = 80.0
    hydration: float = 100.0
    happiness: float = 100.0

    mood: str = "happy"
    is_asleep: bool = False

    insects_today: int = 0
    veggies_today: int = 0
    last_meal: float = 0.0
    total_days_alive: int = 0
    total_meals_eaten: int = 0
    times_handled: int = 0

    def adjust(self, vital: str, delta: float) -> float:
        """Add *delta* to a vital, clamp it to [0, 100] and return the new value."""
        if vital not in VITALS:
            raise KeyError(f"Unknown vital {vital!r}")
        value = clamp(getattr(self, vital) + delta)
        setattr(self, vital, value)
        return value

    def vitals(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in VITALS}

    @property
    def alive(self) -> bool:
        return self.health > VITAL_MIN


def mood_for(creature: Creature) -> str:
    if creature.is_asleep:
        return SLEEPING
    average = sum(creature.vitals().values()) / len(VITALS)
    for bound, mood in MOOD_BANDS:
        if average > bound:
            return mood
    return DISTRESSED
