"""Terrarium - everything a tick system reads or mutates."""
from __future__ import annotations

from dataclasses import dataclass, field

from terrarium.clock import DayCycle
from terrarium.creature import Creature
from terrarium.environment import Controls, Enclosure, Environment, EnvironmentReport
from terrarium.movement import Mover
from terrarium.timers import TimerQueue


@dataclass
class Terrarium:
    """Holds the single creature, its enclosure and in-flight work."""
    controls: Controls = field(default_factory=Controls)
    creature: Creature | None = None
    enclosure: Enclosure = field(default_factory=Enclosure)
    day: DayCycle = field(default_factory=DayCycle)
    uvb_hours_today: float = 0.0
    mover: Mover = field(default_factory=Mover)
    timers: TimerQueue = field(default_factory=TimerQueue)
    env_report: EnvironmentReport | None = None

    def environment(self) -> Environment:
        return self.controls.snapshot()
