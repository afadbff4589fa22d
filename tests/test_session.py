"""Tests for terrarium.session - lifecycle, player actions and save/restore."""

import logging
import random

import pytest
from terrarium import Controls, MemoryStore, Session, SimConfig


class FakeTime:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__(0)
        self._value = value

    def random(self):
        return self._value


class CountingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, data):
        self.writes += 1
        super().write(data)


class BrokenStore(MemoryStore):
    def write(self, data):
        raise OSError("read-only filesystem")


# Behavior polling and idle fidgets are pushed far out so tests control movement.
QUIET = dict(behavior_interval=1000.0, idle_interval=1000.0, message_limit=100)


def make_session(store=None, clock=None, controls=None, seed=3, **config):
    settings = dict(QUIET)
    settings.update(config)
    return Session(controls=controls, store=store if store is not None else MemoryStore(),
                   config=SimConfig(**settings), seed=seed,
                   now=clock if clock is not None else FakeTime())


@pytest.fixture
def clock():
    return FakeTime()


@pytest.fixture
def session(clock):
    s = make_session(clock=clock)
    s.start()
    return s


class TestLifecycle:
    def test_start(self):
        s = make_session()
        creature = s.start("  ", "red")
        assert creature.name == "Spike"
        assert creature.color == "red"
        assert creature.stage == "baby"
        assert s.running
        assert s.position == "basking"
        assert s.log.last("welcome") is not None
        assert s.log.last("hatched").channel == "notification"
        assert s.store.read() is not None

    def test_cannot_start_twice(self, session):
        with pytest.raises(RuntimeError):
            session.start("Other")

    def test_restart_only_after_game_over(self, session):
        with pytest.raises(RuntimeError):
            session.restart()

    def test_restart_before_first_start(self):
        s = make_session()
        assert s.restart("Ember").name == "Ember"
        assert s.running

    def test_actions_need_a_creature(self):
        s = make_session()
        assert s.feed("crickets") is False
        assert s.give_water() is False
        assert s.handle() is False
        assert s.bath() is False
        assert s.clean_tank() is False
        assert s.play() is False
        assert s.pet() is False
        assert s.save() is False
        assert s.advance(5.0) == 0

    def test_ticks_follow_real_time(self, session):
        assert session.advance(2.5) == 2
        assert session.engine.clock.tick_number == 2
        assert session.creature.real_age == 2.0

    def test_close_saves_and_stops(self):
        store = CountingStore()
        s = make_session(store=store)
        s.start()
        s.close()
        assert store.writes == 2
        assert not s.running


class TestFeeding:
    def test_feed_walks_to_dish(self, session):
        session.creature.hunger = 50.0
        assert session.feed("hornworms") is True
        assert session.creature.hunger == pytest.approx(80.0)
        report = session.log.last("ate")
        assert report.text == "Spike ate Hornworms!"
        assert report.data == {"food": "hornworms", "category": "insect"}
        assert session.is_moving
        assert session.terrarium.mover.target == "food"

        session.advance(1.0)
        assert session.position == "food"
        assert session.log.last("eating").channel == "animation"

    def test_feed_while_asleep_skips_the_walk(self, session):
        session.creature.is_asleep = True
        session.creature.hunger = 50.0
        assert session.feed("crickets") is True
        assert session.creature.hunger == pytest.approx(68.0)
        assert not session.is_moving

    def test_unknown_food(self, session):
        assert session.feed("pizza") is False
        assert session.log.last("ate") is None

    def test_water_applies_on_arrival(self, session):
        session.creature.hydration = 50.0
        assert session.give_water() is True
        assert session.creature.hydration == 50.0
        session.advance(2.0)
        assert session.position == "water"
        # +30 on arrival, then two ticks of decay at 0.05 each.
        assert session.creature.hydration == pytest.approx(79.9)
        assert session.log.last("drank") is not None


class TestHandling:
    def test_cooldown(self, session, clock):
        session.engine._rng = FixedRandom(0.9)
        session.creature.happiness = 50.0
        assert session.handle() is True
        assert session.creature.happiness == 55.0
        assert session.log.last("handled") is not None
        assert session.log.last("arm_wave") is not None

        clock.now += 10
        assert session.handle() is False
        assert session.creature.happiness == 55.0
        assert session.creature.times_handled == 1
        assert session.log.last("handle_cooldown").level == "warning"

        clock.now += 20
        assert session.handle() is True
        assert session.creature.times_handled == 2

    def test_stressed_creature_flees_to_hide(self, session):
        session.engine._rng = FixedRandom(0.0)
        session.creature.happiness = 50.0
        assert session.handle() is True
        assert session.creature.happiness == 40.0
        assert session.log.last("beard_puff").data == {"seconds": 3.0}
        assert session.log.last("stressed") is not None
        assert not session.is_moving

        session.advance(0.5)
        assert session.terrarium.mover.target == "hide"
        session.advance(2.1)
        assert session.position == "hide"


class TestCare:
    def test_bath(self, session):
        session.creature.hydration = 50.0
        assert session.bath() is True
        assert session.creature.hydration == 90.0
        assert [r.channel for r in session.log.query(kind="bath")] == ["message", "notification"]

    def test_clean_tank(self, session):
        session.terrarium.enclosure.cleanliness = 20.0
        session.creature.health = 50.0
        assert session.clean_tank() is True
        assert session.terrarium.enclosure.cleanliness == 100.0
        assert session.creature.health == 55.0
        assert session.log.last("cleaned") is not None

    def test_pet(self, session):
        session.creature.happiness = 50.0
        assert session.pet() is True
        assert session.creature.happiness == 52.0
        assert session.log.last("petted") is not None

    def test_pet_while_asleep(self, session):
        session.creature.is_asleep = True
        assert session.pet() is False
        assert session.log.last("asleep").level == "info"

    def test_play_routine(self, session):
        session.creature.happiness = 50.0
        assert session.play() is True
        assert session.play() is False
        for _ in range(80):
            session.advance(0.1)
        assert session.log.last("played") is not None
        assert session.position == "center"
        assert not session.is_moving
        assert session.creature.happiness > 60.0

    def test_play_refused_between_legs(self, session):
        assert session.play() is True
        session.advance(1.0)
        assert session.position == "center"
        assert not session.is_moving
        assert session.play() is False
        for _ in range(80):
            session.advance(0.1)
        assert len(session.log.query(kind="played")) == 1

    def test_play_refused_mid_walk(self, session):
        session.move_to("hide")
        assert session.play() is False


class TestMovement:
    def test_refused_while_walking(self, session):
        assert session.move_to("hide") is True
        assert session.move_to("water") is False
        assert session.give_water() is False

    def test_refused_while_asleep(self, session):
        session.creature.is_asleep = True
        assert session.give_water() is False
        assert not session.is_moving

    def test_unhappy_creature_hides_and_it_is_reported(self):
        s = make_session(behavior_interval=1.0)
        s.start()
        s.creature.happiness = 10.0
        s.advance(1.0)
        assert s.terrarium.mover.target == "hide"
        s.advance(3.0)
        assert s.position == "hide"
        report = s.log.last("moved")
        assert report.text == "Spike moved to the hide cave."
        assert report.data == {"target": "hide", "priority": 7}

    def test_idle_cues(self):
        s = make_session(idle_interval=1.0, idle_chance=1.0)
        s.start()
        for _ in range(20):
            s.advance(1.0)
        cues = s.log.query(channel="animation", kind="idle")
        assert cues
        assert {c.data["animation"] for c in cues} <= {
            "head_bob", "arm_wave", "look_around", "tail_flick", "tongue_flick"}


class TestGrowth:
    def test_stage_up_over_short_days(self):
        s = make_session(seconds_per_day=1.0)
        s.start()
        s.advance(60.0)
        assert s.creature.age == 60
        assert s.creature.stage == "juvenile"
        assert len(s.log.query(channel="notification", kind="stage_up")) == 1


class TestGameOver:
    def _starve(self, s):
        creature = s.creature
        creature.health = 0.0
        creature.hunger = 0.0
        creature.hydration = 0.0
        s.advance(1.0)

    def test_death_ends_run_once(self, session):
        self._starve(session)
        assert session.game_over
        assert not session.running
        deaths = session.log.query(channel="notification", kind="death")
        assert len(deaths) == 1
        assert deaths[0].text == "Spike has passed away..."
        assert session.store.read() is None

        ticks = session.engine.clock.tick_number
        assert session.advance(10.0) == 0
        assert session.engine.clock.tick_number == ticks
        assert session.feed("crickets") is False
        assert len(session.log.query(kind="death")) == 2

    def test_walk_in_flight_finishes_after_death(self, session):
        session.move_to("hide")
        self._starve(session)
        assert session.game_over
        assert session.position == "basking"
        assert session.advance(2.0) == 0
        assert session.position == "hide"
        assert not session.is_moving

    def test_restart_after_death(self, session):
        self._starve(session)
        creature = session.restart("Ember")
        assert creature.name == "Ember"
        assert creature.health == 100.0
        assert not session.game_over
        assert session.running
        assert session.advance(1.0) == 1


class TestSaveLoad:
    def test_round_trip(self, clock):
        store = MemoryStore()
        first = make_session(store=store, clock=clock)
        first.start("Ember", "red")
        second = make_session(store=store, clock=clock)
        assert second.load() is True
        assert second.creature == first.creature
        assert second.running
        assert second.log.last("welcome_back") is not None
        assert second.log.last("away") is None

    def test_catch_up_after_time_away(self, clock):
        store = MemoryStore()
        first = make_session(store=store, clock=clock)
        first.start()
        first.close()
        clock.now += 1000
        second = make_session(store=store, clock=clock)
        assert second.load() is True
        creature = second.creature
        assert creature.hunger == pytest.approx(70.0)
        assert creature.hydration == pytest.approx(95.0)
        assert creature.happiness == pytest.approx(97.0)
        assert second.log.last("away").text == "You were away for 17 minutes."
        assert second.position == "basking"

    def test_catch_up_is_capped(self, clock):
        store = MemoryStore()
        first = make_session(store=store, clock=clock)
        first.start()
        clock.now += 100_000
        second = make_session(store=store, clock=clock)
        second.load()
        assert second.creature.hunger == pytest.approx(60.0)

    def test_nothing_saved(self):
        s = make_session()
        assert s.load() is False
        assert s.creature is None
        assert not s.running

    @pytest.mark.parametrize("payload", ["{not json", '{"version": 99}', "[1, 2]"])
    def test_bad_save_leaves_state_untouched(self, session, payload):
        creature = session.creature
        session.store.text = payload
        assert session.load() is False
        assert session.creature is creature
        assert session.running

    def test_mistyped_vital_leaves_state_untouched(self, session):
        session.terrarium.enclosure.cleanliness = 42.0
        session.terrarium.day.phase = 33.0
        session.move_to("hide")
        data = session.record().to_dict()
        data["creature"]["hunger"] = "lots"
        session.store.write(data)

        creature = session.creature
        assert session.load() is False
        assert session.creature is creature
        assert session.terrarium.enclosure.cleanliness == 42.0
        assert session.terrarium.day.phase == 33.0
        assert session.terrarium.mover.target == "hide"

    def test_out_of_range_vitals_are_clamped(self, clock):
        store = MemoryStore()
        first = make_session(store=store, clock=clock)
        first.start()
        data = first.record().to_dict()
        data["creature"]["health"] = 500.0
        store.write(data)
        second = make_session(store=store, clock=clock)
        assert second.load() is True
        assert second.creature.health == 100.0

    def test_environment_restored_through_callback(self, clock):
        store = MemoryStore()
        first = make_session(store=store, clock=clock, controls=Controls(basking_temp=104))
        first.start()
        controls = Controls()
        second = Session(store=store, config=SimConfig(**QUIET), now=clock,
                         controls=controls, on_environment_restored=controls.apply)
        second.load()
        assert controls.basking_temp == 104


class TestAutosave:
    def test_periodic(self):
        store = CountingStore()
        s = make_session(store=store, autosave_interval=5.0)
        s.start()
        assert store.writes == 1
        s.advance(10.0)
        assert store.writes == 3

    def test_failures_do_not_stop_the_run(self, caplog):
        s = make_session(store=BrokenStore())
        with caplog.at_level(logging.ERROR, logger="terrarium"):
            s.start()
            s.advance(35.0)
        assert s.running
        assert "save failed" in caplog.text
        assert "autosave failed" in caplog.text
