from __future__ import annotations

import logging
from typing import Any

import pydantic
from pydantic import TypeAdapter

from leafrelay.api import DeviceClient, DeviceConnectionError, DeviceResponse
from leafrelay.core.credentials import CredentialManager
from leafrelay.core.relay import RelayLimits, classify_failure
from leafrelay.core.session import DeviceSession
from leafrelay.models import (
    DeviceUnreachable,
    FullState,
    NotConfigured,
    Outcome,
    Success,
)

logger = logging.getLogger(__name__)

FULL_STATE_PATH = "/"
EFFECTS_LIST_PATH = "/effects/effectsList"

_EFFECT_NAMES = TypeAdapter(list[str])


def _field_value(section: dict[str, Any], name: str) -> Any:
    entry = section.get(name)
    if isinstance(entry, dict):
        return entry.get("value")
    return entry


def _coerce_int(value: Any, bounds: tuple[int, int] | None = None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if bounds is not None:
        low, high = bounds
        number = max(low, min(high, number))
    return number


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    return None


def parse_full_state(payload: Any, limits: RelayLimits) -> FullState:
    """Pick the displayed fields out of ``GET /api/v1/{token}/``.

    Raises ValueError when the payload is not shaped like a device state.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("state"), dict):
        raise ValueError("expected an object with a 'state' section")

    state = payload["state"]
    effects = payload.get("effects")
    effects = effects if isinstance(effects, dict) else {}
    ct_entry = state.get("ct") if isinstance(state.get("ct"), dict) else {}

    ct_min = _coerce_int(ct_entry.get("min"))
    ct_max = _coerce_int(ct_entry.get("max"))
    if ct_min is not None and ct_max is not None and ct_min <= ct_max:
        ct_bounds = (ct_min, ct_max)
    else:
        ct_bounds = limits.ct

    effect = effects.get("select")
    color_mode = state.get("colorMode")
    name = payload.get("name")

    return FullState(
        name=name if isinstance(name, str) else None,
        on=_coerce_bool(_field_value(state, "on")),
        brightness=_coerce_int(_field_value(state, "brightness"), limits.brightness),
        ct=_coerce_int(_field_value(state, "ct"), ct_bounds),
        ct_min=ct_min,
        ct_max=ct_max,
        hue=_coerce_int(_field_value(state, "hue"), limits.hue),
        sat=_coerce_int(_field_value(state, "sat"), limits.sat),
        color_mode=color_mode if isinstance(color_mode, str) else None,
        effect=effect if isinstance(effect, str) else None,
        raw=payload,
    )


class StateReader:
    """Read-only counterpart of the command relay."""

    def __init__(
        self,
        session: DeviceSession,
        client: DeviceClient,
        limits: RelayLimits | None = None,
    ) -> None:
        self._session = session
        self._client = client
        self._limits = limits or RelayLimits()
        self._credentials = CredentialManager(session, client)

    async def read_state(self) -> Outcome:
        response = await self._get(FULL_STATE_PATH)
        if not isinstance(response, DeviceResponse):
            return response
        try:
            state = parse_full_state(response.payload, self._limits)
        except ValueError as exc:
            logger.error("Malformed state response: %s", exc)
            return DeviceUnreachable(f"malformed response: {exc}")
        return Success(state, response.status)

    async def read_effects_list(self) -> Outcome:
        response = await self._get(EFFECTS_LIST_PATH)
        if not isinstance(response, DeviceResponse):
            return response
        try:
            names = _EFFECT_NAMES.validate_python(response.payload)
        except pydantic.ValidationError:
            logger.error("Malformed effects list: %r", response.text[:200])
            return DeviceUnreachable("malformed response: expected a list of names")
        return Success(names, response.status)

    async def _get(self, path: str) -> DeviceResponse | Outcome:
        ready = self._session.require()
        if isinstance(ready, NotConfigured):
            return ready

        try:
            response = await self._client.get(ready.url(path))
        except DeviceConnectionError as exc:
            logger.error("Device %s unreachable: %s", ready.address, exc)
            return DeviceUnreachable(str(exc))

        failure = classify_failure(response, ready, self._credentials)
        if failure is not None:
            return failure
        return response
