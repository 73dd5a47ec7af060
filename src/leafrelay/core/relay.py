from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Any

import pydantic
from pydantic import Field, StrictBool, StrictInt, StrictStr, TypeAdapter

from leafrelay.api import DeviceClient, DeviceConnectionError, DeviceResponse
from leafrelay.config import RelayConfig
from leafrelay.core.credentials import CredentialManager
from leafrelay.core.session import DeviceSession, SessionReady
from leafrelay.models import (
    ControlIntent,
    DeviceUnreachable,
    NotConfigured,
    Outcome,
    SelectEffect,
    Success,
    Unauthorized,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATE_PATH = "/state"
EFFECTS_PATH = "/effects"

_UNAUTHORIZED_STATUSES = frozenset({401, 403})


@dataclass(frozen=True)
class RelayLimits:
    brightness: tuple[int, int] = (0, 100)
    ct: tuple[int, int] = (1200, 6500)
    hue: tuple[int, int] = (0, 360)
    sat: tuple[int, int] = (0, 100)

    @classmethod
    def from_config(cls, config: RelayConfig) -> RelayLimits:
        return cls(ct=(config.ct_min, config.ct_max))


def _bounded(bounds: tuple[int, int]) -> TypeAdapter[int]:
    low, high = bounds
    return TypeAdapter(Annotated[StrictInt, Field(ge=low, le=high)])


class IntentValidator:
    """Checks intent values against the accepted ranges, without coercion."""

    def __init__(self, limits: RelayLimits) -> None:
        self._power = TypeAdapter(StrictBool)
        self._effect = TypeAdapter(Annotated[StrictStr, Field(min_length=1)])
        self._ranges: dict[str, tuple[int, int]] = {
            "brightness": limits.brightness,
            "ct": limits.ct,
            "hue": limits.hue,
            "sat": limits.sat,
        }
        self._numbers = {
            name: _bounded(bounds) for name, bounds in self._ranges.items()
        }

    def validate(self, intent: ControlIntent) -> Any:
        """Return the value to send, or a ValidationError outcome."""
        if isinstance(intent, SelectEffect):
            name = intent.name
            if isinstance(name, str):
                name = name.strip()
            try:
                return self._effect.validate_python(name)
            except pydantic.ValidationError:
                return ValidationError("effect name must be a non-empty string")

        if intent.field == "on":
            try:
                return self._power.validate_python(intent.value)
            except pydantic.ValidationError:
                return ValidationError(
                    f"on must be true or false, got {intent.value!r}"
                )

        low, high = self._ranges[intent.field]
        try:
            return self._numbers[intent.field].validate_python(intent.value)
        except pydantic.ValidationError:
            return ValidationError(
                f"{intent.field} must be an integer between {low} and {high}, "
                f"got {intent.value!r}"
            )


def build_request(intent: ControlIntent, value: Any) -> tuple[str, dict[str, Any]]:
    if isinstance(intent, SelectEffect):
        return EFFECTS_PATH, {"select": value}
    return STATE_PATH, {intent.field: {"value": value}}


def classify_failure(
    response: DeviceResponse,
    ready: SessionReady,
    credentials: CredentialManager,
) -> Outcome | None:
    """Map a non-2xx device response to an outcome; ``None`` means success.

    An unauthorized response invalidates the credential that was used.
    """
    if response.ok:
        return None
    if response.status in _UNAUTHORIZED_STATUSES:
        logger.warning(
            "Device %s rejected the auth token (%d)", ready.address, response.status
        )
        credentials.invalidate(rejected=ready.credential)
        return Unauthorized()
    if response.status == 404:
        return DeviceUnreachable("not found")
    return DeviceUnreachable(f"{response.status}: {response.text}".strip())


class CommandRelay:
    """Turns one control intent into at most one device call."""

    def __init__(
        self,
        session: DeviceSession,
        client: DeviceClient,
        limits: RelayLimits | None = None,
    ) -> None:
        self._session = session
        self._client = client
        self._validator = IntentValidator(limits or RelayLimits())
        self._credentials = CredentialManager(session, client)

    async def execute(self, intent: ControlIntent) -> Outcome:
        value = self._validator.validate(intent)
        if isinstance(value, ValidationError):
            logger.info("Rejected %s: %s", type(intent).__name__, value.reason)
            return value

        ready = self._session.require()
        if isinstance(ready, NotConfigured):
            logger.info("Cannot relay %s: %s", type(intent).__name__, ready.reason)
            return ready

        path, payload = build_request(intent, value)
        try:
            response = await self._client.put(ready.url(path), payload)
        except DeviceConnectionError as exc:
            logger.error("Device %s unreachable: %s", ready.address, exc)
            return DeviceUnreachable(str(exc))

        failure = classify_failure(response, ready, self._credentials)
        if failure is not None:
            return failure

        logger.info("Applied %s=%r (status %d)", intent.field, value, response.status)
        return Success(value, response.status)
