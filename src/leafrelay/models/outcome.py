"""Uniform results of every relay, reader, pairing and discovery operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class Success:
    value: Any
    status: int = 200

    kind: ClassVar[str] = "success"
    ok: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "kind": self.kind,
            "value": _jsonable(self.value),
            "apiStatus": self.status,
        }


@dataclass(frozen=True)
class _Failure:
    reason: str = ""

    kind: ClassVar[str] = "failure"
    ok: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "kind": self.kind, "error": self.reason}


@dataclass(frozen=True)
class ValidationError(_Failure):
    kind: ClassVar[str] = "validation_error"


@dataclass(frozen=True)
class Unauthorized(_Failure):
    reason: str = "device rejected the auth token; pair again"

    kind: ClassVar[str] = "unauthorized"


@dataclass(frozen=True)
class DeviceUnreachable(_Failure):
    kind: ClassVar[str] = "device_unreachable"


@dataclass(frozen=True)
class PairingWindowClosed(_Failure):
    reason: str = (
        "pairing window is not open; hold the power button for 5-7 seconds "
        "and pair within 30 seconds"
    )

    kind: ClassVar[str] = "pairing_window_closed"


@dataclass(frozen=True)
class NotConfigured:
    missing: tuple[str, ...] = ("address", "credential")

    kind: ClassVar[str] = "not_configured"
    ok: ClassVar[bool] = False

    @property
    def reason(self) -> str:
        return f"device session incomplete, missing: {', '.join(self.missing)}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "kind": self.kind,
            "error": self.reason,
            "missing": list(self.missing),
        }


@dataclass(frozen=True)
class DiscoveryTimeout:
    timeout_ms: int

    kind: ClassVar[str] = "discovery_timeout"
    ok: ClassVar[bool] = False

    @property
    def reason(self) -> str:
        return f"no device advertised itself within {self.timeout_ms} ms"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "kind": self.kind,
            "error": self.reason,
            "timeoutMs": self.timeout_ms,
        }


Outcome = (
    Success
    | ValidationError
    | Unauthorized
    | DeviceUnreachable
    | PairingWindowClosed
    | NotConfigured
    | DiscoveryTimeout
)
