from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class DeviceAddress(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"http://{self}"


def parse_address(text: str) -> DeviceAddress:
    """Parse ``host:port`` (or ``[v6-addr]:port``) into a DeviceAddress.

    Raises ValueError when the text does not have that shape.
    """
    value = text.strip()
    if value.startswith("["):
        host, sep, rest = value[1:].partition("]")
        if not sep or not rest.startswith(":"):
            raise ValueError(f"Expected [host]:port, got {text!r}")
        port_text = rest[1:]
    else:
        host, sep, port_text = value.rpartition(":")
        if not sep or ":" in host:
            raise ValueError(f"Expected host:port, got {text!r}")

    if not host or not port_text.isdigit():
        raise ValueError(f"Expected host:port, got {text!r}")

    port = int(port_text)
    if not 1 <= port <= 65535:
        raise ValueError(f"Port out of range: {port}")
    return DeviceAddress(host=host, port=port)


class SessionRecord(BaseModel):
    model_config = {"extra": "forbid"}

    host: str | None = None
    port: int | None = None
    token: str | None = None
    revoked_tokens: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    def address(self) -> DeviceAddress | None:
        if self.host and self.port:
            return DeviceAddress(host=self.host, port=self.port)
        return None


class FullState(BaseModel):
    """Subset of the device's full state that the control panel displays.

    ``raw`` keeps the untouched device payload.
    """

    model_config = {"frozen": True}

    name: str | None = None
    on: bool | None = None
    brightness: int | None = None
    ct: int | None = None
    ct_min: int | None = None
    ct_max: int | None = None
    hue: int | None = None
    sat: int | None = None
    color_mode: str | None = None
    effect: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
