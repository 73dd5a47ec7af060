"""Intent surface used by the HTTP relay and the CLI."""

from __future__ import annotations

import logging

from leafrelay.api import DeviceClient
from leafrelay.config import Settings
from leafrelay.core.credentials import CredentialManager
from leafrelay.core.locator import DeviceLocator
from leafrelay.core.reader import StateReader
from leafrelay.core.relay import CommandRelay, RelayLimits
from leafrelay.core.session import DeviceSession, SessionRegistry
from leafrelay.models import (
    ControlIntent,
    DeviceAddress,
    NotConfigured,
    Outcome,
    SelectEffect,
    SetBrightness,
    SetColorTemperature,
    SetHue,
    SetPower,
    SetSaturation,
    Success,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ControlPanel:
    """Maps each user intent onto the component that serves it.

    Every method takes an optional ``context``; ``None`` addresses the
    process-wide session, any other key a session private to that caller.
    """

    def __init__(
        self,
        registry: SessionRegistry | None = None,
        client: DeviceClient | None = None,
        locator: DeviceLocator | None = None,
        limits: RelayLimits | None = None,
    ) -> None:
        self.registry = registry or SessionRegistry()
        self.client = client or DeviceClient()
        self.locator = locator or DeviceLocator()
        self.limits = limits or RelayLimits()

    @classmethod
    def from_settings(
        cls, settings: Settings, registry: SessionRegistry | None = None
    ) -> ControlPanel:
        if registry is None:
            registry = SessionRegistry(max_contexts=settings.server.max_contexts)
        return cls(
            registry=registry,
            client=DeviceClient(timeout=settings.relay.http_timeout),
            locator=DeviceLocator(settings.discovery),
            limits=RelayLimits.from_config(settings.relay),
        )

    def session(self, context: str | None = None) -> DeviceSession:
        return self.registry.acquire(context)

    def credentials(self, context: str | None = None) -> CredentialManager:
        return CredentialManager(self.session(context), self.client)

    async def execute(
        self, intent: ControlIntent, context: str | None = None
    ) -> Outcome:
        relay = CommandRelay(self.session(context), self.client, self.limits)
        return await relay.execute(intent)

    async def set_power(self, on: object, context: str | None = None) -> Outcome:
        return await self.execute(SetPower(on), context)

    async def set_brightness(
        self, value: object, context: str | None = None
    ) -> Outcome:
        return await self.execute(SetBrightness(value), context)

    async def set_color_temperature(
        self, value: object, context: str | None = None
    ) -> Outcome:
        return await self.execute(SetColorTemperature(value), context)

    async def set_hue(self, value: object, context: str | None = None) -> Outcome:
        return await self.execute(SetHue(value), context)

    async def set_saturation(
        self, value: object, context: str | None = None
    ) -> Outcome:
        return await self.execute(SetSaturation(value), context)

    async def select_effect(self, name: object, context: str | None = None) -> Outcome:
        return await self.execute(SelectEffect(name), context)

    async def get_state(self, context: str | None = None) -> Outcome:
        reader = StateReader(self.session(context), self.client, self.limits)
        return await reader.read_state()

    async def get_effects_list(self, context: str | None = None) -> Outcome:
        reader = StateReader(self.session(context), self.client, self.limits)
        return await reader.read_effects_list()

    async def pair(self, context: str | None = None) -> Outcome:
        address = self.session(context).address
        if address is None:
            return NotConfigured(missing=("address",))
        return await self.credentials(context).pair(address)

    async def discover(
        self, timeout_ms: int | None = None, context: str | None = None
    ) -> Outcome:
        result = await self.locator.locate(timeout_ms)
        if not isinstance(result, DeviceAddress):
            return result
        self.session(context).set_address(result)
        return Success(result)

    def set_address(self, text: str, context: str | None = None) -> Outcome:
        result = self.locator.set_address(text)
        if isinstance(result, ValidationError):
            return result
        self.session(context).set_address(result)
        return Success(result)

    def restore_token(self, token: str, context: str | None = None) -> Outcome:
        return self.credentials(context).restore(token)

    def forget(self, context: str | None = None) -> Outcome:
        """Drop the stored credential, e.g. before pairing a different device."""
        self.credentials(context).invalidate()
        return Success(None)
