"""Enclosure conditions and the environment evaluator."""
from __future__ import annotations

from dataclasses import dataclass, field

# Optimal ranges (inclusive).
BASKING_RANGE = (95, 110)
COOL_RANGE = (75, 85)
HUMIDITY_RANGE = (30, 40)
CLEANLINESS_MIN = 50.0


@dataclass(frozen=True)
class Environment:
    """Snapshot of the enclosure controls at one instant."""

    basking_temp: int = 100
    cool_temp: int = 80
    humidity: int = 35
    uvb_on: bool = True


@dataclass
class Controls:
    """Live, externally owned control surface (thermostats, humidifier, UV switch).

    The simulation only ever reads it through :meth:`snapshot`.
    """

    basking_temp: int = 100
    cool_temp: int = 80
    humidity: int = 35
    uvb_on: bool = True

    def snapshot(self) -> Environment:
        return Environment(
            basking_temp=int(self.basking_temp),
            cool_temp=int(self.cool_temp),
            humidity=int(self.humidity),
            uvb_on=bool(self.uvb_on),
        )

    def apply(self, env: Environment) -> None:
        self.basking_temp = env.basking_temp
        self.cool_temp = env.cool_temp
        self.humidity = env.humidity
        self.uvb_on = env.uvb_on


@dataclass
class Enclosure:
    cleanliness: float = 100.0

    def soil(self, amount: float) -> None:
        self.cleanliness = max(0.0, self.cleanliness - amount)

    def clean(self) -> None:
        self.cleanliness = 100.0


@dataclass(frozen=True)
class EnvironmentReport:
    score: int
    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def evaluate(env: Environment, cleanliness: float) -> EnvironmentReport:
    """Score *env* and *cleanliness* against the optimal ranges.

    Starts from 100 and deducts a fixed penalty per violated rule; issues
    are listed in check order. The score never drops below 0.
    """
    issues: list[str] = []
    score = 100

    if env.basking_temp < BASKING_RANGE[0]:
        issues.append("Basking spot too cold!")
        score -= 20
    elif env.basking_temp > BASKING_RANGE[1]:
        issues.append("Basking spot too hot!")
        score -= 25

    if env.cool_temp < COOL_RANGE[0]:
        issues.append("Cool side too cold!")
        score -= 15
    elif env.cool_temp > COOL_RANGE[1]:
        issues.append("Cool side too warm!")
        score -= 15

    if env.humidity < HUMIDITY_RANGE[0]:
        issues.append("Humidity too low!")
        score -= 10
    elif env.humidity > HUMIDITY_RANGE[1]:
        issues.append("Humidity too high! Risk of respiratory infection.")
        score -= 20

    if not env.uvb_on:
        issues.append("UVB light is off! Dragon needs UV for vitamin D.")
        score -= 30

    if cleanliness < CLEANLINESS_MIN:
        issues.append("Tank needs cleaning!")
        score -= 15

    return EnvironmentReport(score=max(0, score), issues=issues)
