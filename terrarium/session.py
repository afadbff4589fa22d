"""Session - owns the creature, the tick engine, player actions and save/restore."""
from __future__ import annotations

import logging
import time
from typing import Callable

from terrarium import actions
from terrarium.behavior import NOTABLE_PRIORITY, Decision, make_behavior_system
from terrarium.clock import DayCycle
from terrarium.config import SimConfig
from terrarium.creature import Creature, mood_for
from terrarium.engine import Engine
from terrarium.environment import Controls, Environment, EnvironmentReport, evaluate
from terrarium.events import EventLog
from terrarium.movement import BASKING, CENTER, COOL_SIDE, FOOD, HIDE, WATER, Movement, Mover
from terrarium.needs import catch_up_decay, make_decay_system
from terrarium.save import MemoryStore, SaveRecord, SaveStore
from terrarium.state import Terrarium
from terrarium.systems import (
    make_aging_system, make_autosave_system, make_daylight_system,
    make_mood_system, make_sleep_system, make_vitality_system,
    make_warning_system,
)
from terrarium.timers import Timer
from terrarium.types import DANGER, INFO, SUCCESS, WARNING, SaveError, TickContext

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Spike"
DEFAULT_COLOR = "normal"
PLAY_ROUTE = (CENTER, COOL_SIDE, BASKING, CENTER)

# (roll upper bound, animation) for idle fidgets; rolls past the last bound do nothing.
IDLE_ANIMATIONS = (
    (0.25, "head_bob"),
    (0.4, "arm_wave"),
    (0.6, "look_around"),
    (0.75, "tail_flick"),
    (0.85, "tongue_flick"),
)


class Session:
    """One creature, one enclosure, one run.

    Drive it with :meth:`advance` (or :meth:`run_forever`); every player
    action is a method that returns False when its precondition fails.
    Reports for the presentation are delivered through :attr:`log`.
    """

    def __init__(
        self,
        controls: Controls | None = None,
        store: SaveStore | None = None,
        config: SimConfig | None = None,
        seed: int | None = None,
        now: Callable[[], float] = time.time,
        on_environment_restored: Callable[[Environment], None] | None = None,
    ) -> None:
        self.config: SimConfig = config if config is not None else SimConfig()
        self.store: SaveStore = store if store is not None else MemoryStore()
        self._now = now
        self._on_environment_restored = on_environment_restored

        self.terrarium = Terrarium(
            controls=controls if controls is not None else Controls(),
            day=DayCycle(rate=self.config.day_cycle_rate),
            mover=Mover(on_arrive=self._on_arrive),
        )
        self.engine = Engine(self.terrarium, self.config.tick_seconds, seed)
        self.log = EventLog(
            self.config.message_limit,
            clock_fn=now,
            tick_fn=lambda: self.engine.clock.tick_number,
        )

        self._arrivals: dict[str, Callable[[Movement], None]] = {
            "eat": self._arrive_eat,
            "drink": self._arrive_drink,
            "play": self._arrive_play,
            "behavior": self._arrive_behavior,
        }
        self._timer_handlers: dict[str, Callable[[Timer], None]] = {
            "flee": self._fire_flee,
            "play_next": self._fire_play_next,
        }
        self._last_handled: float | None = None
        self._play_route: list[str] = []
        self._idle_elapsed = 0.0
        self._game_over = False

        self._install_systems()

    def _install_systems(self) -> None:
        cfg = self.config
        for system in (
            make_aging_system(self.log, cfg.seconds_per_day),
            make_daylight_system(),
            make_decay_system(),
            make_mood_system(),
            make_sleep_system(self.log),
            make_warning_system(self.log),
            make_vitality_system(self._on_death),
            make_behavior_system(cfg.behavior_interval, self._on_decide),
            make_autosave_system(cfg.autosave_interval, self.save),
        ):
            self.engine.add_system(system)
        self.engine.on_stop(self._on_stop)

    # --- State queries ---

    @property
    def creature(self) -> Creature | None:
        return self.terrarium.creature

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def running(self) -> bool:
        return self.engine.running

    @property
    def position(self) -> str:
        return self.terrarium.mover.current

    @property
    def is_moving(self) -> bool:
        return self.terrarium.mover.is_moving

    def environment_report(self) -> EnvironmentReport:
        return evaluate(self.terrarium.environment(), self.terrarium.enclosure.cleanliness)

    def _live(self) -> Creature | None:
        if self._game_over:
            return None
        return self.terrarium.creature

    def _refresh_mood(self) -> None:
        if self.terrarium.creature is not None:
            self.terrarium.creature.mood = mood_for(self.terrarium.creature)

    # --- Lifecycle ---

    def start(self, name: str = DEFAULT_NAME, color: str = DEFAULT_COLOR) -> Creature:
        """Hatch a new creature and begin ticking."""
        if self._live() is not None:
            raise RuntimeError("Session already has a live creature")
        self._reset_world()
        creature = Creature(name=name.strip() or DEFAULT_NAME,
                            color=color or DEFAULT_COLOR,
                            last_meal=self._now())
        self.terrarium.creature = creature
        self.log.message(SUCCESS, f"Welcome {creature.name}! Your bearded dragon adventure begins!",
                         "welcome")
        self.log.notify(SUCCESS, f"{creature.name} has hatched!", "hatched")
        logger.info("started session for %s (%s)", creature.name, creature.color)
        self.engine.start()
        self._save_quietly()
        return creature

    def restart(self, name: str = DEFAULT_NAME, color: str = DEFAULT_COLOR) -> Creature:
        """Start over after the creature has died (or hatch the first one)."""
        if self.terrarium.creature is not None and not self._game_over:
            raise RuntimeError("restart is only offered after game over")
        return self.start(name, color)

    def _reset_world(self) -> None:
        self._game_over = False
        self.terrarium.enclosure.clean()
        self.terrarium.day.phase = 0.0
        self.terrarium.uvb_hours_today = 0.0
        self.terrarium.env_report = None
        self.terrarium.mover.reset(BASKING)
        self.terrarium.timers.clear()
        self._play_route.clear()
        self._last_handled = None
        self._idle_elapsed = 0.0

    def _on_death(self, terrarium: Terrarium, ctx: TickContext) -> None:
        creature = terrarium.creature
        assert creature is not None
        self._game_over = True
        self.log.notify(DANGER, f"{creature.name} has passed away...", "death",
                        age=creature.age)
        self.log.message(DANGER, f"{creature.name} lived for {creature.age} days.", "death",
                         age=creature.age)
        logger.info("%s died at tick %d aged %d days", creature.name,
                    ctx.tick_number, creature.age)
        try:
            self.store.delete()
        except OSError:
            logger.exception("could not delete save after death")

    def _on_stop(self, terrarium: Terrarium, ctx: TickContext) -> None:
        logger.info("scheduling stopped at tick %d", ctx.tick_number)

    def close(self) -> None:
        """Save (best effort) and stop scheduling."""
        if self._live() is not None:
            self._save_quietly()
        self.engine.stop()

    # --- Scheduling ---

    def advance(self, seconds: float) -> int:
        """Let *seconds* of real time pass; returns the number of ticks run.

        A walk in flight at game over still finishes; nothing else runs
        once the engine has stopped.
        """
        if not self.engine.running and not self._game_over:
            return 0
        for timer in self.terrarium.timers.advance(seconds):
            self._timer_handlers[timer.name](timer)
        self.terrarium.mover.advance(seconds)
        if not self.engine.running:
            return 0
        self._advance_idle(seconds)
        return self.engine.advance(seconds)

    def run_forever(self, frame_seconds: float = 0.1) -> None:
        last = time.monotonic()
        while self.engine.running:
            time.sleep(frame_seconds)
            now = time.monotonic()
            self.advance(now - last)
            last = now

    def _advance_idle(self, seconds: float) -> None:
        self._idle_elapsed += seconds
        while self._idle_elapsed >= self.config.idle_interval:
            self._idle_elapsed -= self.config.idle_interval
            self._idle_fidget()

    def _idle_fidget(self) -> None:
        creature = self._live()
        if creature is None or creature.is_asleep or self.is_moving:
            return
        rng = self.engine.random
        if rng.random() >= self.config.idle_chance:
            return
        roll = rng.random()
        for bound, animation in IDLE_ANIMATIONS:
            if roll < bound:
                self.log.cue("idle", animation=animation)
                return

    # --- Movement ---

    def move_to(self, key: str, purpose: str = "", priority: int = 0) -> bool:
        """Send the creature walking; refused while asleep or already walking."""
        creature = self._live()
        if creature is None or creature.is_asleep:
            return False
        return self.terrarium.mover.move_to(key, purpose, priority)

    def _on_decide(self, terrarium: Terrarium, ctx: TickContext, decision: Decision) -> None:
        self.move_to(decision.target, "behavior", decision.priority)

    def _on_arrive(self, movement: Movement) -> None:
        handler = self._arrivals.get(movement.purpose)
        if handler is not None:
            handler(movement)

    def _arrive_eat(self, movement: Movement) -> None:
        self.log.cue("eating", bobs=6)

    def _arrive_drink(self, movement: Movement) -> None:
        creature = self._live()
        if creature is None:
            return
        actions.apply_drink(creature)
        self._refresh_mood()
        self.log.cue("head_bob", bobs=4 if creature.happiness > 70 else 2)
        self.log.message(INFO, f"{creature.name} drank some water!", "drank")

    def _arrive_behavior(self, movement: Movement) -> None:
        creature = self._live()
        if creature is None or movement.priority < NOTABLE_PRIORITY:
            return
        place = self.terrarium.mover.positions[movement.target].name
        self.log.message(INFO, f"{creature.name} moved to the {place}.", "moved",
                         target=movement.target, priority=movement.priority)

    def _arrive_play(self, movement: Movement) -> None:
        creature = self._live()
        if creature is None:
            return
        if self._play_route:
            self.terrarium.timers.add("play_next", self.config.play_pause)
            return
        actions.apply_play_reward(creature)
        self._refresh_mood()
        self.log.message(SUCCESS, f"{creature.name} had fun playing!", "played")

    def _fire_flee(self, timer: Timer) -> None:
        self.move_to(HIDE)

    def _fire_play_next(self, timer: Timer) -> None:
        self._play_leg()

    def _play_leg(self) -> bool:
        if not self._play_route:
            return False
        key = self._play_route.pop(0)
        if self.move_to(key, "play"):
            return True
        logger.debug("play routine abandoned at %s", key)
        self._play_route.clear()
        return False

    # --- Player actions ---

    def feed(self, food_kind: str) -> bool:
        creature = self._live()
        food = actions.FOODS.get(food_kind)
        if creature is None or food is None:
            return False
        actions.apply_food(creature, food, self._now())
        self._refresh_mood()
        self.move_to(FOOD, "eat")
        self.log.message(SUCCESS, f"{creature.name} ate {food.label}!", "ate",
                         food=food_kind, category=food.category)
        return True

    def give_water(self) -> bool:
        if self._live() is None:
            return False
        return self.move_to(WATER, "drink")

    def handle(self) -> bool:
        creature = self._live()
        if creature is None:
            return False
        now = self._now()
        if (self._last_handled is not None
                and now - self._last_handled < self.config.handle_cooldown):
            self.log.message(WARNING, f"{creature.name} needs a break from handling.",
                             "handle_cooldown")
            return False
        outcome = actions.apply_handle(creature, self.engine.random)
        if outcome.stressed:
            self.log.cue("beard_puff", seconds=3.0)
            self.log.message(WARNING, f"{creature.name} got a bit stressed from handling.",
                             "stressed")
            self.terrarium.timers.add("flee", self.config.flee_delay)
        else:
            self.log.message(SUCCESS, f"{creature.name} enjoyed being handled!", "handled")
            self.log.cue("arm_wave")
        self._last_handled = now
        self._refresh_mood()
        return True

    def bath(self) -> bool:
        creature = self._live()
        if creature is None:
            return False
        actions.apply_bath(creature)
        self._refresh_mood()
        self.log.message(SUCCESS, f"{creature.name} enjoyed a warm bath!", "bath")
        self.log.notify(SUCCESS, "Bath time! Your dragon is clean and hydrated.", "bath")
        return True

    def clean_tank(self) -> bool:
        creature = self._live()
        if creature is None:
            return False
        actions.apply_clean(creature, self.terrarium.enclosure)
        self._refresh_mood()
        self.log.message(SUCCESS, "Tank cleaned! Environment is now spotless.", "cleaned")
        return True

    def play(self) -> bool:
        if self._live() is None or self.is_moving or self._play_route:
            return False
        self._play_route = list(PLAY_ROUTE)
        return self._play_leg()

    def pet(self) -> bool:
        creature = self._live()
        if creature is None:
            return False
        if creature.is_asleep:
            self.log.message(INFO, f"Shhh... {creature.name} is sleeping.", "asleep")
            return False
        actions.apply_pet(creature)
        self._refresh_mood()
        self.log.message(SUCCESS, f"{creature.name} likes the attention!", "petted")
        return True

    # --- Save / restore ---

    def record(self) -> SaveRecord | None:
        creature = self._live()
        if creature is None:
            return None
        return SaveRecord(
            creature=creature,
            cleanliness=self.terrarium.enclosure.cleanliness,
            day_night=self.terrarium.day.phase,
            uvb_hours_today=self.terrarium.uvb_hours_today,
            environment=self.terrarium.environment(),
            saved_at=self._now(),
        )

    def save(self) -> bool:
        record = self.record()
        if record is None:
            return False
        self.store.write(record.to_dict())
        return True

    def _save_quietly(self) -> None:
        try:
            self.save()
        except Exception:
            logger.exception("save failed")

    def load(self) -> bool:
        """Restore the stored session, applying capped decay for the time away.

        Returns False, leaving the current state untouched, when there is no
        save or it cannot be read.
        """
        try:
            data = self.store.read()
            if data is None:
                return False
            record = SaveRecord.from_dict(data)
        except (OSError, ValueError, SaveError) as exc:
            logger.warning("could not load save: %s", exc)
            return False

        away = self._now() - record.saved_at
        creature = record.creature
        if catch_up_decay(creature, away, self.config.catch_up_rate,
                          self.config.catch_up_cap) > 0:
            creature.mood = mood_for(creature)

        self._reset_world()
        self.terrarium.creature = creature
        self.terrarium.enclosure.cleanliness = record.cleanliness
        self.terrarium.day.phase = record.day_night
        self.terrarium.uvb_hours_today = record.uvb_hours_today
        if record.environment is not None and self._on_environment_restored is not None:
            self._on_environment_restored(record.environment)

        self.log.message(SUCCESS, f"Welcome back! {creature.name} missed you!", "welcome_back")
        if away > self.config.away_notice:
            self.log.message(INFO, f"You were away for {round(away / 60)} minutes.", "away",
                             seconds=away)
        logger.info("loaded %s after %.0f seconds away", creature.name, away)
        self.engine.start()
        return True
