"""Shared types, constants and errors for the terrarium simulation."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

# Growth stages.
BABY = "baby"
JUVENILE = "juvenile"
SUBADULT = "subadult"
ADULT = "adult"

# Report levels.
INFO = "info"
SUCCESS = "success"
WARNING = "warning"
DANGER = "danger"
LEVELS = (INFO, SUCCESS, WARNING, DANGER)

VITALS = ("health", "hunger", "hydration", "happiness")


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]
    random: _random.Random


class SaveError(Exception):
    """Raised when a save record cannot be decoded (version or schema mismatch)."""


if TYPE_CHECKING:
    from terrarium.state import Terrarium

System = Callable[["Terrarium", TickContext], None]
