from __future__ import annotations

from typing import Any

import pytest

from leafrelay.api import DeviceResponse
from leafrelay.config import get_settings
from leafrelay.core import DeviceSession
from leafrelay.models import DeviceAddress

DEVICE = DeviceAddress(host="192.168.1.50", port=16021)
TOKEN = "tok123"


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in ("LEAFRELAY_CONFIG", "LEAFRELAY_DEVICE", "LEAFRELAY_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeClient:
    """Stands in for DeviceClient and records every request."""

    def __init__(
        self,
        responses: list[DeviceResponse] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.responses = list(responses or [DeviceResponse(status=204)])
        self.error = error
        self.calls: list[tuple[str, str, Any]] = []
        self.before_reply = None

    async def request(
        self, method: str, url: str, payload: dict[str, Any] | None = None
    ) -> DeviceResponse:
        self.calls.append((method, url, payload))
        if self.before_reply is not None:
            self.before_reply()
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    async def get(self, url: str) -> DeviceResponse:
        return await self.request("GET", url)

    async def put(self, url: str, payload: dict[str, Any]) -> DeviceResponse:
        return await self.request("PUT", url, payload)

    async def post(
        self, url: str, payload: dict[str, Any] | None = None
    ) -> DeviceResponse:
        return await self.request("POST", url, payload)


@pytest.fixture
def make_client():
    def _make(*responses: DeviceResponse, error: Exception | None = None):
        return FakeClient(list(responses) or None, error=error)

    return _make


@pytest.fixture
def ready_session() -> DeviceSession:
    return DeviceSession(address=DEVICE, credential=TOKEN)
