from __future__ import annotations

import asyncio

from aiohttp import web
from aiohttp.test_utils import TestServer

from leafrelay.api import DeviceClient
from leafrelay.core import ControlPanel
from leafrelay.models import DeviceUnreachable


def _serve_bytes(status: int, body: bytes) -> web.Application:
    async def handler(request: web.Request) -> web.Response:
        return web.Response(status=status, body=body)

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)
    return app


def test_undecodable_body_is_replaced():
    async def _run():
        server = TestServer(_serve_bytes(200, b"\xff\xfe\xfa"))
        await server.start_server()
        try:
            url = f"http://127.0.0.1:{server.port}/api/v1/tok/"
            return await DeviceClient().get(url)
        finally:
            await server.close()

    response = asyncio.run(_run())

    assert response.status == 200
    assert response.text == "\ufffd" * 3
    assert response.payload is None


def test_undecodable_error_body_becomes_outcome():
    async def _run():
        server = TestServer(_serve_bytes(500, b"\xff\xfe\xfa"))
        await server.start_server()
        try:
            panel = ControlPanel()
            panel.set_address(f"127.0.0.1:{server.port}")
            panel.restore_token("tok")
            return await panel.set_brightness(10), panel.session().credential
        finally:
            await server.close()

    outcome, credential = asyncio.run(_run())

    assert isinstance(outcome, DeviceUnreachable)
    assert outcome.reason.startswith("500:")
    assert credential == "tok"
