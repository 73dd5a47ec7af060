from __future__ import annotations

import asyncio
import logging
import secrets
import socket
import time
from dataclasses import dataclass, field
from typing import Any

from aiohttp import web
from zeroconf import ServiceInfo
from zeroconf.asyncio import AsyncZeroconf

from leafrelay.config import NANOLEAF_PORT, NANOLEAF_SERVICE_TYPE

logger = logging.getLogger(__name__)

PAIRING_WINDOW_S = 30.0

DEFAULT_EFFECTS = [
    "Flames",
    "Forest",
    "Inner Peace",
    "Nemo",
    "Northern Lights",
    "Rainbow Flow",
    "Romantic",
    "Snowfall",
]


def default_state() -> dict[str, Any]:
    return {
        "on": {"value": False},
        "brightness": {"value": 100, "max": 100, "min": 0},
        "hue": {"value": 0, "max": 360, "min": 0},
        "sat": {"value": 0, "max": 100, "min": 0},
        "ct": {"value": 4000, "max": 6500, "min": 1200},
        "colorMode": "effect",
    }


_COLOR_MODES = {"hue": "hs", "sat": "hs", "ct": "ct"}


def _local_ip() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"


@dataclass
class MockNanoleafDevice:
    name: str = "Mock Light Panels"
    host: str = "0.0.0.0"
    port: int = NANOLEAF_PORT
    serial: str = "MOCK00000001"
    firmware: str = "9.0.0"
    advertise: bool = False

    state: dict[str, Any] = field(default_factory=default_state)
    effects: list[str] = field(default_factory=lambda: list(DEFAULT_EFFECTS))
    selected_effect: str = "Flames"
    tokens: set[str] = field(default_factory=set)

    _pairing_until: float = field(default=0.0, repr=False)
    _runner: web.AppRunner | None = field(default=None, repr=False)
    _zeroconf: AsyncZeroconf | None = field(default=None, repr=False)
    _service: ServiceInfo | None = field(default=None, repr=False)

    @property
    def pairing_open(self) -> bool:
        return time.monotonic() < self._pairing_until

    def open_pairing_window(self, seconds: float = PAIRING_WINDOW_S) -> None:
        self._pairing_until = time.monotonic() + seconds
        logger.info("Pairing window open for %.0fs", seconds)

    def close_pairing_window(self) -> None:
        self._pairing_until = 0.0

    def issue_token(self) -> str:
        token = secrets.token_hex(16)
        self.tokens.add(token)
        return token

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/v1/new", self._handle_new)
        app.router.add_get("/api/v1/{token}", self._handle_full_state)
        app.router.add_get("/api/v1/{token}/", self._handle_full_state)
        app.router.add_put("/api/v1/{token}/state", self._handle_state)
        app.router.add_put("/api/v1/{token}/effects", self._handle_effects)
        app.router.add_get(
            "/api/v1/{token}/effects/effectsList", self._handle_effects_list
        )
        return app

    async def start(self) -> None:
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Mock device '%s' listening on port %d", self.name, self.port)
        if self.advertise:
            await self._register_service()

    async def stop(self) -> None:
        if self._zeroconf is not None:
            if self._service is not None:
                await self._zeroconf.async_unregister_service(self._service)
            await self._zeroconf.async_close()
            self._zeroconf = None
            self._service = None
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Mock device '%s' stopped", self.name)

    async def run_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()

    async def _register_service(self) -> None:
        ip = _local_ip()
        self._service = ServiceInfo(
            NANOLEAF_SERVICE_TYPE,
            f"{self.name}.{NANOLEAF_SERVICE_TYPE}",
            addresses=[socket.inet_aton(ip)],
            port=self.port,
            properties={"id": self.serial, "md": "NL22", "srcvers": self.firmware},
            server=f"{self.serial.lower()}.local.",
        )
        self._zeroconf = AsyncZeroconf()
        await self._zeroconf.async_register_service(self._service)
        logger.info("Advertising %s at %s:%d", NANOLEAF_SERVICE_TYPE, ip, self.port)

    def _authorized(self, request: web.Request) -> bool:
        return request.match_info["token"] in self.tokens

    async def _handle_new(self, request: web.Request) -> web.Response:
        if not self.pairing_open:
            logger.info("Pairing attempt outside the pairing window")
            return web.Response(status=403)
        token = self.issue_token()
        logger.info("Issued new auth token")
        return web.json_response({"auth_token": token})

    async def _handle_full_state(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return web.Response(status=401)
        return web.json_response(
            {
                "name": self.name,
                "serialNo": self.serial,
                "firmwareVersion": self.firmware,
                "state": self.state,
                "effects": {
                    "select": self.selected_effect,
                    "effectsList": self.effects,
                },
            }
        )

    async def _handle_state(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return web.Response(status=401)
        try:
            body = await request.json()
        except ValueError:
            return web.Response(status=400, text="invalid JSON")
        if not isinstance(body, dict) or not body:
            return web.Response(status=400, text="empty state update")

        for key, update in body.items():
            entry = self.state.get(key)
            if not isinstance(entry, dict) or not isinstance(update, dict):
                return web.Response(status=422, text=f"unsupported field {key!r}")
            if "value" not in update:
                return web.Response(status=422, text=f"missing value for {key!r}")
            entry["value"] = update["value"]
            if key in _COLOR_MODES:
                self.state["colorMode"] = _COLOR_MODES[key]
            logger.info("State %s -> %r", key, update["value"])
        return web.Response(status=204)

    async def _handle_effects(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return web.Response(status=401)
        try:
            body = await request.json()
        except ValueError:
            return web.Response(status=400, text="invalid JSON")
        name = body.get("select") if isinstance(body, dict) else None
        if name not in self.effects:
            return web.Response(status=404)
        self.selected_effect = name
        self.state["colorMode"] = "effect"
        logger.info("Effect -> %s", name)
        return web.Response(status=204)

    async def _handle_effects_list(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return web.Response(status=401)
        return web.json_response(self.effects)


async def run_mock_device(
    name: str = "Mock Light Panels",
    port: int = NANOLEAF_PORT,
    token: str | None = None,
    advertise: bool = False,
    pairing_open: bool = False,
) -> None:
    device = MockNanoleafDevice(name=name, port=port, advertise=advertise)
    if token:
        device.tokens.add(token)
    if pairing_open:
        device.open_pairing_window()
    await device.run_forever()
