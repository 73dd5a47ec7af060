"""HTTP relay exposing the control panel to the browser UI."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from aiohttp import web
from aiohttp.web import Request, Response

from leafrelay.core import ControlPanel
from leafrelay.models import NotConfigured, Outcome, ValidationError
from leafrelay.services import ensure_address

logger = logging.getLogger(__name__)

CONTEXT_HEADER = "X-Device-Host"

HTTP_STATUS = {
    "success": 200,
    "validation_error": 400,
    "unauthorized": 401,
    "pairing_window_closed": 403,
    "not_configured": 409,
    "device_unreachable": 502,
    "discovery_timeout": 504,
}

ValueAction = Callable[..., Awaitable[Outcome]]


def outcome_response(outcome: Outcome) -> Response:
    return web.json_response(outcome.to_dict(), status=HTTP_STATUS[outcome.kind])


async def _json_body(request: Request) -> dict[str, Any] | ValidationError:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError:
        return ValidationError("request body is not valid JSON")
    if not isinstance(body, dict):
        return ValidationError("request body must be a JSON object")
    return body


class RelayServer:
    """aiohttp application forwarding UI requests to the control panel.

    A request carrying ``X-Device-Host: host:port`` is served from a session
    private to that host instead of the process-wide one.
    """

    def __init__(
        self, panel: ControlPanel, host: str = "127.0.0.1", port: int = 8778
    ) -> None:
        self.panel = panel
        self.host = host
        self.port = port
        self.app = web.Application()
        self.setup_routes()

    def setup_routes(self) -> None:
        router = self.app.router
        router.add_get("/health", self.health_check)
        router.add_post("/api/add-user", self.pair)
        router.add_post("/api/forget", self.forget)
        router.add_post("/api/discover", self.discover)
        router.add_post("/api/set-address", self.set_address)
        router.add_post(
            "/api/set-on-state", self._value_route("onState", self.panel.set_power)
        )
        router.add_post(
            "/api/set-brightness",
            self._value_route("brightness", self.panel.set_brightness),
        )
        router.add_post(
            "/api/set-ct", self._value_route("ct", self.panel.set_color_temperature)
        )
        router.add_post("/api/set-hue", self._value_route("hue", self.panel.set_hue))
        router.add_post(
            "/api/set-sat", self._value_route("sat", self.panel.set_saturation)
        )
        router.add_post(
            "/api/select-effect",
            self._value_route("effectName", self.panel.select_effect),
        )
        router.add_get("/api/get-effects-list", self.get_effects_list)
        router.add_get("/api/get-state", self.get_state)

    def _context(self, request: Request) -> str | None | ValidationError:
        header = request.headers.get(CONTEXT_HEADER, "").strip()
        if not header:
            return None
        outcome = self.panel.set_address(header, context=header)
        if isinstance(outcome, ValidationError):
            return ValidationError(f"{CONTEXT_HEADER}: {outcome.reason}")
        return header

    def _value_route(
        self, key: str, action: ValueAction
    ) -> Callable[[Request], Awaitable[Response]]:
        async def handler(request: Request) -> Response:
            context = self._context(request)
            if isinstance(context, ValidationError):
                return outcome_response(context)
            body = await _json_body(request)
            if isinstance(body, ValidationError):
                return outcome_response(body)
            if key not in body:
                return outcome_response(ValidationError(f"missing field {key!r}"))
            logger.debug("%s %s=%r", request.path, key, body[key])
            return outcome_response(await action(body[key], context=context))

        return handler

    async def health_check(self, request: Request) -> Response:
        ready = self.panel.session().require()
        missing = list(ready.missing) if isinstance(ready, NotConfigured) else []
        return web.json_response(
            {"status": "healthy", "configured": not missing, "missing": missing}
        )

    async def pair(self, request: Request) -> Response:
        context = self._context(request)
        if isinstance(context, ValidationError):
            return outcome_response(context)
        return outcome_response(await self.panel.pair(context=context))

    async def forget(self, request: Request) -> Response:
        context = self._context(request)
        if isinstance(context, ValidationError):
            return outcome_response(context)
        return outcome_response(self.panel.forget(context=context))

    async def discover(self, request: Request) -> Response:
        body = await _json_body(request)
        if isinstance(body, ValidationError):
            return outcome_response(body)
        return outcome_response(await self.panel.discover(body.get("timeoutMs")))

    async def set_address(self, request: Request) -> Response:
        body = await _json_body(request)
        if isinstance(body, ValidationError):
            return outcome_response(body)
        address = body.get("address")
        if not isinstance(address, str):
            return outcome_response(
                ValidationError("address must be a 'host:port' string")
            )
        return outcome_response(self.panel.set_address(address))

    async def get_effects_list(self, request: Request) -> Response:
        context = self._context(request)
        if isinstance(context, ValidationError):
            return outcome_response(context)
        return outcome_response(await self.panel.get_effects_list(context=context))

    async def get_state(self, request: Request) -> Response:
        context = self._context(request)
        if isinstance(context, ValidationError):
            return outcome_response(context)
        return outcome_response(await self.panel.get_state(context=context))

    async def start(self) -> None:
        """Start serving; discovers the device first if no address is known."""
        outcome = await ensure_address(self.panel)
        if outcome.ok:
            logger.info("Relaying to device at %s", outcome.value)
        else:
            logger.warning(
                "No device address yet (%s); set one via /api/set-address or "
                "/api/discover",
                outcome.reason,
            )

        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()
        logger.info("Relay server listening on http://%s:%d", self.host, self.port)

        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()
