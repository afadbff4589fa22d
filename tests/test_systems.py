"""Tests for the tick systems in terrarium.systems."""

import logging
import random

import pytest
from terrarium import Creature, EnvironmentReport, EventLog, Terrarium
from terrarium.systems import (
    make_aging_system, make_autosave_system, make_daylight_system,
    make_mood_system, make_sleep_system, make_vitality_system,
    make_warning_system,
)
from terrarium.types import TickContext


class ZeroRandom(random.Random):
    def random(self):
        return 0.0


class OneRandom(random.Random):
    def random(self):
        return 0.999


def make_ctx(tick=1, dt=1.0, rng=None, request_stop=lambda: None):
    return TickContext(tick_number=tick, dt=dt, elapsed=tick * dt,
                       request_stop=request_stop, random=rng or random.Random(0))


def make_log():
    return EventLog(max_entries=0, clock_fn=lambda: 0.0)


class TestAging:
    def test_day_rolls_over_after_seconds_per_day(self):
        log = make_log()
        system = make_aging_system(log)
        terrarium = Terrarium(creature=Creature(real_age=118.0, insects_today=3, veggies_today=2))
        system(terrarium, make_ctx())
        assert terrarium.creature.age == 0
        assert terrarium.creature.insects_today == 3

        system(terrarium, make_ctx())
        creature = terrarium.creature
        assert creature.age == 1
        assert creature.total_days_alive == 1
        assert creature.insects_today == 0
        assert creature.veggies_today == 0
        assert creature.size == pytest.approx(4 + 4 / 30)

    def test_stage_change_reported_once(self):
        log = make_log()
        system = make_aging_system(log)
        creature = Creature(age=59, real_age=59 * 120 + 119.0)
        terrarium = Terrarium(creature=creature)
        for _ in range(5):
            system(terrarium, make_ctx())
        assert creature.age == 60
        assert creature.stage == "juvenile"
        assert creature.size == pytest.approx(12.0)
        reports = log.query(kind="stage_up")
        assert [r.channel for r in reports] == ["notification", "message"]
        assert reports[0].data == {"old": "baby", "new": "juvenile"}

    def test_no_creature(self):
        make_aging_system(make_log())(Terrarium(), make_ctx())


class TestDaylight:
    def test_phase_moves_into_night(self):
        terrarium = Terrarium(creature=Creature())
        terrarium.day.phase = 49.8
        make_daylight_system()(terrarium, make_ctx())
        assert terrarium.day.phase == pytest.approx(50.3)
        assert terrarium.day.is_night
        assert terrarium.uvb_hours_today == 0.0

    def test_uv_accumulates_during_day(self):
        terrarium = Terrarium(creature=Creature())
        make_daylight_system()(terrarium, make_ctx(dt=36.0))
        assert terrarium.uvb_hours_today == pytest.approx(0.01)

    def test_no_uv_when_lamp_off(self):
        terrarium = Terrarium(creature=Creature())
        terrarium.controls.uvb_on = False
        make_daylight_system()(terrarium, make_ctx())
        assert terrarium.uvb_hours_today == 0.0

    def test_midnight_resets_uv(self):
        terrarium = Terrarium(creature=Creature(), uvb_hours_today=2.5)
        terrarium.day.phase = 99.8
        make_daylight_system()(terrarium, make_ctx())
        assert terrarium.day.phase == pytest.approx(0.3)
        assert terrarium.uvb_hours_today == 0.0


class TestMood:
    def test_recomputed(self):
        terrarium = Terrarium(creature=Creature(health=50.0, hunger=50.0,
                                                hydration=50.0, happiness=50.0))
        make_mood_system()(terrarium, make_ctx())
        assert terrarium.creature.mood == "okay"


class TestSleep:
    def test_sleeps_at_night_and_wakes_at_dawn(self):
        log = make_log()
        system = make_sleep_system(log)
        terrarium = Terrarium(creature=Creature())
        terrarium.day.phase = 60.0
        system(terrarium, make_ctx())
        assert terrarium.creature.is_asleep
        assert log.last("sleep") is not None

        system(terrarium, make_ctx())
        assert len(log.query(kind="sleep")) == 1

        terrarium.day.phase = 10.0
        system(terrarium, make_ctx())
        assert not terrarium.creature.is_asleep
        assert log.last("wake") is not None

    def test_unhappy_creature_stays_awake(self):
        log = make_log()
        terrarium = Terrarium(creature=Creature(happiness=30.0))
        terrarium.day.phase = 60.0
        make_sleep_system(log)(terrarium, make_ctx())
        assert not terrarium.creature.is_asleep


class TestWarnings:
    def _neglected(self):
        terrarium = Terrarium(creature=Creature(hunger=10.0, hydration=10.0, health=20.0))
        terrarium.env_report = EnvironmentReport(score=70, issues=["Humidity too low!"])
        return terrarium

    def test_every_warning_fires_on_lucky_roll(self):
        log = make_log()
        make_warning_system(log)(self._neglected(), make_ctx(rng=ZeroRandom(0)))
        assert [(r.channel, r.kind) for r in log.query()] == [
            ("message", "hungry"),
            ("notification", "hungry"),
            ("message", "thirsty"),
            ("message", "sick"),
            ("notification", "sick"),
            ("message", "environment"),
        ]
        assert log.last("environment").text == "Humidity too low!"
        assert log.last("environment").level == "warning"

    def test_silent_on_unlucky_roll(self):
        log = make_log()
        make_warning_system(log)(self._neglected(), make_ctx(rng=OneRandom(0)))
        assert len(log) == 0

    def test_healthy_creature_never_warned(self):
        log = make_log()
        terrarium = Terrarium(creature=Creature())
        terrarium.env_report = EnvironmentReport(score=100)
        make_warning_system(log)(terrarium, make_ctx(rng=ZeroRandom(0)))
        assert len(log) == 0


class TestVitality:
    def test_death_requests_stop(self):
        deaths = []
        stops = []
        system = make_vitality_system(lambda t, ctx: deaths.append(t.creature.name))
        terrarium = Terrarium(creature=Creature(health=0.0))
        system(terrarium, make_ctx(request_stop=lambda: stops.append(1)))
        assert deaths == ["Spike"]
        assert stops == [1]

    def test_alive_is_untouched(self):
        stops = []
        system = make_vitality_system(lambda t, ctx: None)
        system(Terrarium(creature=Creature(health=0.5)),
               make_ctx(request_stop=lambda: stops.append(1)))
        assert stops == []


class TestAutosave:
    def test_saves_every_interval(self):
        saves = []
        system = make_autosave_system(3.0, lambda: saves.append(1))
        terrarium = Terrarium(creature=Creature())
        for tick in range(1, 8):
            system(terrarium, make_ctx(tick=tick))
        assert len(saves) == 2

    def test_failure_is_logged_not_raised(self, caplog):
        def broken():
            raise OSError("disk full")

        system = make_autosave_system(1.0, broken)
        with caplog.at_level(logging.ERROR, logger="terrarium.systems"):
            system(Terrarium(creature=Creature()), make_ctx())
        assert "autosave failed" in caplog.text
