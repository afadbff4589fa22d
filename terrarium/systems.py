"""Tick system factories wired together by the session."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from terrarium.clock import age_in_days
from terrarium.creature import mood_for
from terrarium.growth import size_for, stage_for
from terrarium.types import DANGER, INFO, SUCCESS, WARNING

if TYPE_CHECKING:
    from terrarium.events import EventLog
    from terrarium.state import Terrarium
    from terrarium.types import TickContext

logger = logging.getLogger(__name__)

HUNGER_WARNING_CHANCE = 0.01
THIRST_WARNING_CHANCE = 0.01
HEALTH_WARNING_CHANCE = 0.01
ENVIRONMENT_WARNING_CHANCE = 0.005
STARVING = 15.0
DEHYDRATED = 15.0
CRITICAL_HEALTH = 30.0
SLEEPY_HAPPINESS = 30.0


def make_aging_system(
    log: EventLog,
    seconds_per_day: float = 120.0,
) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that ages the creature and rolls over game days.

    On each new day the size is recomputed and the daily diet counters
    reset; a change of growth stage is reported exactly once.
    """

    def aging_system(terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        if creature is None:
            return
        creature.real_age += ctx.dt
        age = age_in_days(creature.real_age, seconds_per_day)
        if age <= creature.age:
            return
        creature.age = age
        creature.total_days_alive = age

        stage = stage_for(age)
        if stage != creature.stage:
            old = creature.stage
            creature.stage = stage
            log.notify(SUCCESS, f"{creature.name} has grown into a {stage}!",
                       "stage_up", old=old, new=stage)
            log.message(SUCCESS, f"{creature.name} is now a {stage}!",
                        "stage_up", old=old, new=stage)

        creature.size = size_for(age)
        creature.insects_today = 0
        creature.veggies_today = 0

    return aging_system


def make_daylight_system() -> Callable[[Terrarium, TickContext], None]:
    """Return a system that turns the day/night wheel and counts UV exposure."""

    def daylight_system(terrarium: Terrarium, ctx: TickContext) -> None:
        if terrarium.creature is None:
            return
        night = terrarium.day.advance(ctx.dt)
        if terrarium.environment().uvb_on and not night:
            terrarium.uvb_hours_today += ctx.dt / 3600
        if terrarium.day.at_midnight:
            terrarium.uvb_hours_today = 0.0

    return daylight_system


def make_mood_system() -> Callable[[Terrarium, TickContext], None]:
    def mood_system(terrarium: Terrarium, ctx: TickContext) -> None:
        if terrarium.creature is not None:
            terrarium.creature.mood = mood_for(terrarium.creature)

    return mood_system


def make_sleep_system(log: EventLog) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that puts a content creature to sleep at night and wakes it at dawn."""

    def sleep_system(terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        if creature is None:
            return
        night = terrarium.day.is_night
        if night and not creature.is_asleep and creature.happiness > SLEEPY_HAPPINESS:
            creature.is_asleep = True
            log.message(INFO, f"{creature.name} fell asleep.", "sleep")
        elif not night and creature.is_asleep:
            creature.is_asleep = False
            log.message(INFO, f"{creature.name} woke up!", "wake")

    return sleep_system


def make_warning_system(log: EventLog) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that occasionally nags about critical stats and bad conditions.

    Every warning is an independent roll each tick, so a neglected
    creature is mentioned now and then rather than on every tick.
    """

    def warning_system(terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        if creature is None:
            return
        rng = ctx.random
        if creature.hunger < STARVING and rng.random() < HUNGER_WARNING_CHANCE:
            log.message(DANGER, f"{creature.name} is very hungry!", "hungry")
            log.notify(DANGER, "Your dragon is starving!", "hungry")
        if creature.hydration < DEHYDRATED and rng.random() < THIRST_WARNING_CHANCE:
            log.message(DANGER, f"{creature.name} is dehydrated!", "thirsty")
        if creature.health < CRITICAL_HEALTH and rng.random() < HEALTH_WARNING_CHANCE:
            log.message(DANGER, f"{creature.name} needs medical attention!", "sick")
            log.notify(DANGER, "Your dragon's health is critical!", "sick")
        report = terrarium.env_report
        if report is not None and report.issues and rng.random() < ENVIRONMENT_WARNING_CHANCE:
            log.message(WARNING, report.issues[0], "environment")

    return warning_system


def make_vitality_system(
    on_death: Callable[[Terrarium, TickContext], None],
) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that ends the run once health is exhausted.

    *on_death* runs before the stop request, so nothing later in the
    tick sees a dead creature.
    """

    def vitality_system(terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        if creature is None or creature.health > 0:
            return
        on_death(terrarium, ctx)
        ctx.request_stop()

    return vitality_system


def make_autosave_system(
    interval: float,
    save: Callable[[], None],
) -> Callable[[Terrarium, TickContext], None]:
    """Return a system that saves every *interval* simulated seconds.

    Failures are logged and dropped; a save never interrupts the tick.
    """
    since_save = 0.0

    def autosave_system(terrarium: Terrarium, ctx: TickContext) -> None:
        nonlocal since_save
        if terrarium.creature is None:
            return
        since_save += ctx.dt
        if since_save < interval:
            return
        since_save = 0.0
        try:
            save()
        except Exception:
            logger.exception("autosave failed")

    return autosave_system
