from __future__ import annotations

from .client import DeviceClient, DeviceConnectionError, DeviceResponse

__all__ = ["DeviceClient", "DeviceConnectionError", "DeviceResponse"]
