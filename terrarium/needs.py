"""Needs decay: per-tick vital drain, environment health effects, offline catch-up."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from terrarium.creature import clamp
from terrarium.environment import evaluate
from terrarium.types import BABY

if TYPE_CHECKING:
    from terrarium.creature import Creature
    from terrarium.environment import Enclosure
    from terrarium.state import Terrarium
    from terrarium.types import TickContext

DECAY_PER_SECOND = 0.1
POOR_ENVIRONMENT = 50
GOOD_ENVIRONMENT = 80
LOW_VITAL = 20.0
DIRTY_TANK = 30.0


@dataclass(frozen=True)
class DecayResult:
    base: float
    health_delta: float


def decay_needs(creature: Creature, enclosure: Enclosure, dt: float,
                env_score: int) -> DecayResult:
    """Drain vitals for *dt* seconds and apply the accumulated health change."""
    base = dt * DECAY_PER_SECOND

    hunger_rate = 2.0 if creature.stage == BABY else 1.0
    creature.hunger = clamp(creature.hunger - base * hunger_rate)
    creature.hydration = clamp(creature.hydration - base * 0.5)
    mood_rate = 2.0 if env_score < POOR_ENVIRONMENT else 0.5
    creature.happiness = clamp(creature.happiness - base * mood_rate)

    health_delta = 0.0
    if env_score < POOR_ENVIRONMENT:
        health_delta -= base * 0.5
    elif env_score > GOOD_ENVIRONMENT:
        health_delta += base * 0.1
    if creature.hunger < LOW_VITAL:
        health_delta -= base * 0.3
    if creature.hydration < LOW_VITAL:
        health_delta -= base * 0.3

    enclosure.soil(base * 0.05)
    if enclosure.cleanliness < DIRTY_TANK:
        health_delta -= base * 0.2

    creature.health = clamp(creature.health + health_delta)
    return DecayResult(base=base, health_delta=health_delta)


def catch_up_decay(creature: Creature, seconds_away: float,
                   rate: float = 0.01, cap: float = 20.0) -> float:
    """One-shot decay for time spent away; returns the amount applied."""
    amount = min(max(0.0, seconds_away) * rate, cap)
    creature.hunger = clamp(creature.hunger - amount)
    creature.hydration = clamp(creature.hydration - amount * 0.5)
    creature.happiness = clamp(creature.happiness - amount * 0.3)
    return amount


def make_decay_system() -> Callable[[Terrarium, TickContext], None]:
    """Return a system that evaluates the environment and decays the creature's needs.

    The environment report is stored on the terrarium so later systems in
    the same tick see the same evaluation.
    """

    def decay_system(terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        if creature is None:
            return
        env = terrarium.environment()
        report = evaluate(env, terrarium.enclosure.cleanliness)
        terrarium.env_report = report
        decay_needs(creature, terrarium.enclosure, ctx.dt, report.score)

    return decay_system
