"""Autonomous behavior: a priority-ordered choice of where to walk next.

Bands, highest first; once a band fires, lower bands are skipped::

    10  hungry (< 20)                      -> food dish
     9  thirsty (< 25)                     -> water dish
     8  too cold                           -> basking rock
        too hot while on the basking rock  -> cool side
     7  unhappy (< 30)                     -> hide
     5  15% thermoregulation shuttle       -> basking <-> cool side
     3  8% wander                          -> any other position

All randomness comes from the injected ``random.Random`` so a seeded
generator reproduces the exact branch taken.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from terrarium.movement import BASKING, COOL_SIDE, FOOD, HIDE, WATER

if TYPE_CHECKING:
    from terrarium.creature import Creature
    from terrarium.environment import Environment
    from terrarium.state import Terrarium
    from terrarium.types import TickContext

HUNGER_URGENT = 20.0
THIRST_URGENT = 25.0
UNHAPPY = 30.0
COLD_BASKING = 95
COLD_AVERAGE = 80
HOT_BASKING = 110

SHUTTLE_CHANCE = 0.15
SHUTTLE_TO_COOL = 0.3
SHUTTLE_TO_BASKING = 0.4
WANDER_CHANCE = 0.08

# Arrivals from decisions at or above this priority are reported.
NOTABLE_PRIORITY = 7


@dataclass(frozen=True)
class Decision:
    target: str
    priority: int


def plan(creature: Creature, current: str, env: Environment,
         rng: random.Random, positions: list[str]) -> Decision | None:
    decision: Decision | None = None

    if creature.hunger < HUNGER_URGENT and current != FOOD:
        decision = Decision(FOOD, 10)

    if decision is None and creature.hydration < THIRST_URGENT and current != WATER:
        decision = Decision(WATER, 9)

    if decision is None:
        average = (env.basking_temp + env.cool_temp) / 2
        if env.basking_temp < COLD_BASKING or average < COLD_AVERAGE:
            if current != BASKING:
                decision = Decision(BASKING, 8)
        elif env.basking_temp > HOT_BASKING and current == BASKING:
            decision = Decision(COOL_SIDE, 8)

    if decision is None and creature.happiness < UNHAPPY and current != HIDE:
        decision = Decision(HIDE, 7)

    if decision is None and rng.random() < SHUTTLE_CHANCE:
        if current == BASKING and rng.random() < SHUTTLE_TO_COOL:
            decision = Decision(COOL_SIDE, 5)
        elif current == COOL_SIDE and rng.random() < SHUTTLE_TO_BASKING:
            decision = Decision(BASKING, 5)

    if decision is None and rng.random() < WANDER_CHANCE:
        choices = [key for key in positions if key != current]
        if choices:
            decision = Decision(rng.choice(choices), 3)

    return decision


def make_behavior_system(
    interval: float,
    on_decide: Callable[[Terrarium, TickContext, Decision], None],
) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that plans at most once per *interval* seconds.

    Planning is skipped while the creature sleeps or walks; *on_decide*
    receives each decision and is responsible for issuing the move.
    """
    last_check = 0.0

    def behavior_system(terrarium: Terrarium, ctx: TickContext) -> None:
        nonlocal last_check
        creature = terrarium.creature
        mover = terrarium.mover
        if creature is None or creature.is_asleep or mover.is_moving:
            return
        if ctx.elapsed - last_check < interval:
            return
        last_check = ctx.elapsed
        decision = plan(creature, mover.current, terrarium.environment(),
                        ctx.random, list(mover.positions))
        if decision is not None:
            on_decide(terrarium, ctx, decision)

    return behavior_system
