"""User intents accepted by the command relay.

Intents carry the caller's raw value; range checking happens in the relay so
that a bad value comes back as an outcome instead of an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class SetPower:
    on: object

    field: ClassVar[str] = "on"

    @property
    def value(self) -> object:
        return self.on


@dataclass(frozen=True)
class SetBrightness:
    value: object

    field: ClassVar[str] = "brightness"


@dataclass(frozen=True)
class SetColorTemperature:
    value: object

    field: ClassVar[str] = "ct"


@dataclass(frozen=True)
class SetHue:
    value: object

    field: ClassVar[str] = "hue"


@dataclass(frozen=True)
class SetSaturation:
    value: object

    field: ClassVar[str] = "sat"


@dataclass(frozen=True)
class SelectEffect:
    name: object

    field: ClassVar[str] = "select"

    @property
    def value(self) -> object:
        return self.name


StateIntent = SetPower | SetBrightness | SetColorTemperature | SetHue | SetSaturation
ControlIntent = StateIntent | SelectEffect
