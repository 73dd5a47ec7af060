"""Data models for leafrelay."""

from leafrelay.models.device import (
    DeviceAddress,
    FullState,
    SessionRecord,
    parse_address,
)
from leafrelay.models.intents import (
    ControlIntent,
    SelectEffect,
    SetBrightness,
    SetColorTemperature,
    SetHue,
    SetPower,
    SetSaturation,
    StateIntent,
)
from leafrelay.models.outcome import (
    DeviceUnreachable,
    DiscoveryTimeout,
    NotConfigured,
    Outcome,
    PairingWindowClosed,
    Success,
    Unauthorized,
    ValidationError,
)

__all__ = [
    "ControlIntent",
    "DeviceAddress",
    "DeviceUnreachable",
    "DiscoveryTimeout",
    "FullState",
    "NotConfigured",
    "Outcome",
    "PairingWindowClosed",
    "SelectEffect",
    "SessionRecord",
    "SetBrightness",
    "SetColorTemperature",
    "SetHue",
    "SetPower",
    "SetSaturation",
    "StateIntent",
    "Success",
    "Unauthorized",
    "ValidationError",
    "parse_address",
]
