from __future__ import annotations

from .credentials import CredentialManager
from .locator import DeviceLocator, DiscoveryBrowser
from .mock_device import MockNanoleafDevice, run_mock_device
from .panel import ControlPanel
from .reader import StateReader, parse_full_state
from .relay import CommandRelay, IntentValidator, RelayLimits
from .session import DEFAULT_CONTEXT, DeviceSession, SessionReady, SessionRegistry

__all__ = [
    "DEFAULT_CONTEXT",
    "CommandRelay",
    "ControlPanel",
    "CredentialManager",
    "DeviceLocator",
    "DeviceSession",
    "DiscoveryBrowser",
    "IntentValidator",
    "MockNanoleafDevice",
    "RelayLimits",
    "SessionReady",
    "SessionRegistry",
    "StateReader",
    "parse_full_state",
    "run_mock_device",
]
