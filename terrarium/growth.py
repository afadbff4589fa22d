"""Growth model: stage and size as pure functions of age in game days."""
from __future__ import annotations

from terrarium.types import ADULT, BABY, JUVENILE, SUBADULT

STAGE_THRESHOLDS = ((0, BABY), (60, JUVENILE), (180, SUBADULT), (365, ADULT))

# (start_day, end_day, start_inches, end_inches); the last piece is open-ended.
_SIZE_PIECES = (
    (0, 30, 4.0, 8.0),
    (30, 60, 8.0, 12.0),
    (60, 180, 12.0, 18.0),
    (180, 365, 18.0, 22.0),
)
ADULT_GROWTH_DAYS = 365
MAX_SIZE = 24.0


def stage_for(age: float) -> str:
    """Growth stage for *age*; each stage covers a half-open day range."""
    stage = BABY
    for start, name in STAGE_THRESHOLDS:
        if age >= start:
            stage = name
    return stage


def size_for(age: float) -> float:
    """Length in inches, piecewise-linear in age and capped at ``MAX_SIZE``."""
    age = max(0.0, age)
    for start, end, lo, hi in _SIZE_PIECES:
        if age < end:
            return lo + (age - start) / (end - start) * (hi - lo)
    return min(MAX_SIZE, 22.0 + (age - 365) / ADULT_GROWTH_DAYS * 2.0)
