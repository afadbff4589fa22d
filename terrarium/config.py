"""Simulation configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimConfig:
    """Immutable tuning for a terrarium session.

    Attributes:
        tick_seconds: Fixed period of one simulation tick.
        seconds_per_day: Real seconds that make one game day.
        day_cycle_rate: Day/night phase units gained per second (phase wraps at 100).
        behavior_interval: Minimum seconds between behavior decisions.
        idle_interval: Seconds between idle-animation rolls.
        idle_chance: Chance an idle roll plays anything at all.
        autosave_interval: Simulated seconds between autosaves.
        handle_cooldown: Seconds the creature needs between handling sessions.
        flee_delay: Delay before a stressed creature runs to its hide.
        play_pause: Pause between the legs of a play routine.
        message_limit: Number of reports the event log retains.
        catch_up_rate: Offline decay per second away.
        catch_up_cap: Upper bound on offline decay.
        away_notice: Seconds away before the welcome-back report mentions it.
    """

    tick_seconds: float = 1.0
    seconds_per_day: float = 120.0
    day_cycle_rate: float = 0.5
    behavior_interval: float = 3.0
    idle_interval: float = 4.0
    idle_chance: float = 0.4
    autosave_interval: float = 30.0
    handle_cooldown: float = 30.0
    flee_delay: float = 0.5
    play_pause: float = 0.5
    message_limit: int = 20
    catch_up_rate: float = 0.01
    catch_up_cap: float = 20.0
    away_notice: float = 60.0

    def __post_init__(self) -> None:
        for name in ("tick_seconds", "seconds_per_day", "behavior_interval",
                     "idle_interval", "autosave_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
