"""terrarium - A real-time bearded dragon care simulation core."""

from terrarium.actions import FOODS, Food, effectiveness
from terrarium.behavior import Decision, plan
from terrarium.clock import Clock, DayCycle, age_in_days
from terrarium.config import SimConfig
from terrarium.creature import Creature, clamp, mood_for
from terrarium.engine import Engine
from terrarium.environment import Controls, Enclosure, Environment, EnvironmentReport, evaluate
from terrarium.events import EventLog, Report
from terrarium.growth import size_for, stage_for
from terrarium.movement import POSITIONS, Movement, Mover, Position, travel_time_ms
from terrarium.needs import catch_up_decay, decay_needs
from terrarium.save import JsonFileStore, MemoryStore, SaveRecord
from terrarium.session import Session
from terrarium.state import Terrarium
from terrarium.types import SaveError, TickContext

__all__ = [
    "Session",
    "SimConfig",
    "Engine",
    "Clock",
    "DayCycle",
    "TickContext",
    "Terrarium",
    "Creature",
    "Controls",
    "Environment",
    "EnvironmentReport",
    "Enclosure",
    "EventLog",
    "Report",
    "Decision",
    "Movement",
    "Mover",
    "Position",
    "POSITIONS",
    "Food",
    "FOODS",
    "SaveRecord",
    "JsonFileStore",
    "MemoryStore",
    "SaveError",
    "age_in_days",
    "catch_up_decay",
    "clamp",
    "decay_needs",
    "effectiveness",
    "evaluate",
    "mood_for",
    "plan",
    "size_for",
    "stage_for",
    "travel_time_ms",
]
