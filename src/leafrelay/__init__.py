"""leafrelay - local control relay for Nanoleaf lights."""

from __future__ import annotations

from importlib.metadata import version

from .config import Settings, get_settings
from .core import ControlPanel, DeviceSession, SessionRegistry
from .models import DeviceAddress, FullState, Outcome
from .storage import Database

__all__ = [
    "ControlPanel",
    "Database",
    "DeviceAddress",
    "DeviceSession",
    "FullState",
    "Outcome",
    "SessionRegistry",
    "Settings",
    "__version__",
    "get_settings",
]

__version__ = version("leafrelay")
