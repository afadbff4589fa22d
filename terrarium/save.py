"""Save record shape and best-effort stores."""
from __future__ import annotations

import dataclasses
import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from terrarium.creature import Creature, clamp
from terrarium.environment import Environment
from terrarium.growth import stage_for
from terrarium.types import SaveError

_SAVE_VERSION = 1

_TEXT_FIELDS = ("name", "color", "mood")
_COUNT_FIELDS = ("age", "insects_today", "veggies_today", "total_days_alive",
                 "total_meals_eaten", "times_handled")
_VITAL_FIELDS = ("health", "hunger", "hydration", "happiness")
_REAL_FIELDS = ("real_age", "size", "last_meal")


def _real(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


def _creature_from_dict(data: dict[str, Any]) -> Creature:
    """Rebuild a creature with coerced field types.

    Vitals are clamped to [0, 100] and the stage is rederived from age, so a
    hand-edited save cannot produce an impossible creature.
    """
    if not isinstance(data, dict):
        raise TypeError(f"creature must be an object, got {type(data).__name__}")
    known = {f.name for f in dataclasses.fields(Creature)}
    unknown = set(data) - known
    if unknown:
        raise TypeError(f"unknown creature fields: {sorted(unknown)}")
    if not isinstance(data["is_asleep"], bool):
        raise TypeError("is_asleep must be a boolean")

    fields: dict[str, Any] = {"is_asleep": data["is_asleep"]}
    for name in _TEXT_FIELDS:
        if not isinstance(data[name], str):
            raise TypeError(f"{name} must be a string")
        fields[name] = data[name]
    for name in _COUNT_FIELDS:
        fields[name] = max(0, int(data[name]))
    for name in _REAL_FIELDS:
        fields[name] = _real(data[name])
    for name in _VITAL_FIELDS:
        fields[name] = clamp(_real(data[name]))
    fields["stage"] = stage_for(fields["age"])
    return Creature(**fields)


def _environment_from_dict(data: dict[str, Any]) -> Environment:
    if not isinstance(data["uvb_on"], bool):
        raise TypeError("uvb_on must be a boolean")
    return Environment(
        basking_temp=int(data["basking_temp"]),
        cool_temp=int(data["cool_temp"]),
        humidity=int(data["humidity"]),
        uvb_on=data["uvb_on"],
    )


@dataclass
class SaveRecord:
    creature: Creature
    cleanliness: float
    day_night: float
    uvb_hours_today: float
    environment: Environment | None
    saved_at: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": _SAVE_VERSION,
            "creature": dataclasses.asdict(self.creature),
            "cleanliness": self.cleanliness,
            "day_night": self.day_night,
            "uvb_hours_today": self.uvb_hours_today,
            "environment": (dataclasses.asdict(self.environment)
                            if self.environment is not None else None),
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveRecord:
        if not isinstance(data, dict):
            raise SaveError(f"Save record must be an object, got {type(data).__name__}")
        version = data.get("version")
        if version != _SAVE_VERSION:
            raise SaveError(
                f"Unsupported save version {version!r}, expected {_SAVE_VERSION}"
            )
        try:
            creature = _creature_from_dict(data["creature"])
            env_data = data.get("environment")
            environment = _environment_from_dict(env_data) if env_data else None
            return cls(
                creature=creature,
                cleanliness=clamp(_real(data["cleanliness"])),
                day_night=_real(data["day_night"]) % 100.0,
                uvb_hours_today=max(0.0, _real(data["uvb_hours_today"])),
                environment=environment,
                saved_at=_real(data["saved_at"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SaveError(f"Malformed save record: {exc}") from exc


class SaveStore(Protocol):
    def write(self, data: dict[str, Any]) -> None: ...

    def read(self) -> dict[str, Any] | None: ...

    def delete(self) -> None: ...


class MemoryStore:
    """Keeps the save as a JSON string, the way a browser key/value store would."""

    def __init__(self) -> None:
        self.text: str | None = None

    def write(self, data: dict[str, Any]) -> None:
        self.text = json.dumps(data)

    def read(self) -> dict[str, Any] | None:
        if self.text is None:
            return None
        return json.loads(self.text)

    def delete(self) -> None:
        self.text = None


class JsonFileStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, data: dict[str, Any]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w") as f:
            json.dump(data, f)
        os.replace(tmp, self._path)

    def read(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        with self._path.open() as f:
            return json.load(f)

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)
