"""Care actions: nutrition table and the stat effects of each player action.

These functions only mutate vitals and counters. Preconditions, walking
and reporting are handled by :class:`terrarium.session.Session`.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from terrarium.types import BABY, JUVENILE

if TYPE_CHECKING:
    from terrarium.creature import Creature
    from terrarium.environment import Enclosure

INSECT = "insect"
VEGGIE = "veggie"


@dataclass(frozen=True)
class Food:
    label: str
    hunger: float
    health: float
    happiness: float
    category: str


FOODS: dict[str, Food] = {
    "crickets": Food("Crickets", 15, 5, 5, INSECT),
    "dubia": Food("Dubia Roaches", 20, 8, 8, INSECT),
    "mealworms": Food("Mealworms", 10, 3, 3, INSECT),
    "hornworms": Food("Hornworms", 25, 5, 15, INSECT),
    "collards": Food("Collard Greens", 10, 10, 2, VEGGIE),
    "squash": Food("Butternut Squash", 12, 8, 3, VEGGIE),
    "bell-pepper": Food("Bell Pepper", 8, 5, 2, VEGGIE),
}

DRINK_HYDRATION = 30
DRINK_HAPPINESS = 5
BATH = {"hydration": 40, "happiness": 10, "health": 5}
CLEAN = {"health": 5, "happiness": 5}
PLAY_HAPPINESS = 15
PLAY_HUNGER = 5
PET_HAPPINESS = 2

STRESS_CHANCE = {BABY: 0.3}
DEFAULT_STRESS_CHANCE = 0.1
HANDLE_GAIN = {BABY: 5}
DEFAULT_HANDLE_GAIN = 10
STRESS_PENALTY = 10


def effectiveness(stage: str, category: str) -> float:
    """Young dragons thrive on insects, older ones on greens."""
    if stage in (BABY, JUVENILE):
        return 1.2 if category == INSECT else 0.8
    return 1.2 if category == VEGGIE else 0.9


def apply_food(creature: Creature, food: Food, now: float) -> float:
    """Feed *food*; hunger and health scale with effectiveness, happiness does not."""
    factor = effectiveness(creature.stage, food.category)
    creature.adjust("hunger", food.hunger * factor)
    creature.adjust("health", food.health * factor)
    creature.adjust("happiness", food.happiness)
    creature.last_meal = now
    creature.total_meals_eaten += 1
    if food.category == INSECT:
        creature.insects_today += 1
    else:
        creature.veggies_today += 1
    return factor


def apply_drink(creature: Creature) -> None:
    creature.adjust("hydration", DRINK_HYDRATION)
    creature.adjust("happiness", DRINK_HAPPINESS)


def apply_bath(creature: Creature) -> None:
    for vital, delta in BATH.items():
        creature.adjust(vital, delta)


def apply_clean(creature: Creature, enclosure: Enclosure) -> None:
    enclosure.clean()
    for vital, delta in CLEAN.items():
        creature.adjust(vital, delta)


@dataclass(frozen=True)
class HandleOutcome:
    stressed: bool
    happiness_delta: float


def apply_handle(creature: Creature, rng: random.Random) -> HandleOutcome:
    """Roll for stress and apply the result; counts the handling either way."""
    chance = STRESS_CHANCE.get(creature.stage, DEFAULT_STRESS_CHANCE)
    before = creature.happiness
    if rng.random() < chance:
        creature.adjust("happiness", -STRESS_PENALTY)
        stressed = True
    else:
        creature.adjust("happiness", HANDLE_GAIN.get(creature.stage, DEFAULT_HANDLE_GAIN))
        stressed = False
    creature.times_handled += 1
    return HandleOutcome(stressed=stressed, happiness_delta=creature.happiness - before)


def apply_play_reward(creature: Creature) -> None:
    creature.adjust("happiness", PLAY_HAPPINESS)
    creature.adjust("hunger", -PLAY_HUNGER)


def apply_pet(creature: Creature) -> None:
    creature.adjust("happiness", PET_HAPPINESS)
